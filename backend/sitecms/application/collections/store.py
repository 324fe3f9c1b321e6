# sitecms/application/collections/store.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from flask import current_app
from sqlalchemy import false, or_, select

from sitecms.domain.batch import BatchResult
from sitecms.domain.exceptions import CapExceeded, NotFound, ValidationError
from sitecms.domain.filters import CollectionFilter, FilterCriteria, parse_collection_filter
from sitecms.domain.invariants.block import assert_reorder_payload
from sitecms.extensions import db
from sitecms.media import registry
from sitecms.models.site import Site
from sitecms.storage.registry import get_storage
from sitecms.utils.audit import log_action
from sitecms.utils.media import item_folder
from sitecms.utils.order import apply_order
from sitecms.utils.transaction import transactional
from .payloads import validate_payload
from .specs import CollectionSpec, get_spec


class CollectionStore:
    """
    Site-scoped storage for one collection type (vehicles, gallery, ...).

    Every read and write is filtered by `site_id`; an id that belongs to
    another site is reported exactly like a missing one.
    """

    def __init__(self, spec: Union[CollectionSpec, str]):
        self.spec = get_spec(spec) if isinstance(spec, str) else spec
        self.model = self.spec.model

    # ------------------------
    # Reads
    # ------------------------
    def _query(self, site_id: str, include_deleted: bool = False):
        query = self.model.query.filter(self.model.site_id == site_id)
        if not include_deleted:
            query = query.filter(self.model.deleted_at.is_(None))
        return query

    def _ordering(self):
        if self.spec.order_field:
            column = getattr(self.model, self.spec.order_field)
            # Explicit display order ascending, unset values last.
            return (column.is_(None), column.asc(), self.model.created_at.asc())

        newest = getattr(self.model, self.spec.newest_field)
        return (newest.desc(), self.model.created_at.desc(), self.model.id.desc())

    def _apply_criteria(self, query, criteria: FilterCriteria):
        spec = self.spec
        for name, value in criteria.active().items():
            if name == "featured_only":
                if not spec.featured_field:
                    # Nothing in this collection can be featured.
                    return query.filter(false())
                query = query.filter(getattr(self.model, spec.featured_field).is_(True))
                continue

            if name == "search":
                if spec.search_fields:
                    query = query.filter(or_(*[
                        getattr(self.model, column).icontains(value, autoescape=True)
                        for column in spec.search_fields
                    ]))
                continue

            if name in spec.exact_filters:
                query = query.filter(getattr(self.model, spec.exact_filters[name]) == value)
                continue

            if name in spec.range_filters:
                column_name, operator = spec.range_filters[name]
                column = getattr(self.model, column_name)
                query = query.filter(column >= value if operator == ">=" else column <= value)
                continue

            current_app.logger.debug("Filter '%s' not supported by %s, ignored", name, spec.name)

        return query

    @staticmethod
    def _filters(filters):
        if filters is None:
            return CollectionFilter()
        if isinstance(filters, dict):
            return parse_collection_filter(filters)
        return filters

    def _filtered(self, site_id: str, filters, include_deleted: bool):
        criteria = filters.criteria() if isinstance(filters, CollectionFilter) else filters
        return self._apply_criteria(self._query(site_id, include_deleted), criteria)

    def list(
        self,
        site_id: str,
        filters: Union[CollectionFilter, FilterCriteria, Dict[str, Any], None] = None,
        *,
        include_deleted: bool = False,
        limit: Optional[int] = None,
    ) -> List[Any]:
        filters = self._filters(filters)
        query = self._filtered(site_id, filters, include_deleted)
        query = query.order_by(*self._ordering())

        offset = getattr(filters, "offset", 0) or 0
        limit = limit or getattr(filters, "limit", None)
        if offset:
            query = query.offset(offset).limit(limit or 50)
        elif limit:
            query = query.limit(limit)

        return query.all()

    def count(
        self,
        site_id: str,
        filters: Union[CollectionFilter, FilterCriteria, Dict[str, Any], None] = None,
        *,
        include_deleted: bool = False,
    ) -> int:
        """Number of items matching `filters`, ignoring limit and offset."""
        return self._filtered(site_id, self._filters(filters), include_deleted).count()

    def featured_count(self, site_id: str) -> int:
        if not self.spec.featured_field:
            return 0
        column = getattr(self.model, self.spec.featured_field)
        return self._query(site_id).filter(column.is_(True)).count()

    def distinct_values(self, site_id: str, field: str) -> List[Any]:
        if field not in self.spec.exact_filters.values():
            raise ValidationError(f"Field '{field}' cannot be listed for {self.spec.name}")
        column = getattr(self.model, field)
        rows = (
            db.session.query(column)
            .filter(self.model.site_id == site_id, self.model.deleted_at.is_(None), column.isnot(None))
            .distinct()
            .all()
        )
        return sorted(value for (value,) in rows)

    def get(self, item_id: str, site_id: str, *, include_deleted: bool = True):
        item = self._query(site_id, include_deleted).filter(self.model.id == item_id).first()
        if item is None:
            raise NotFound(f"{self.spec.entity_type} not found")
        return item

    # ------------------------
    # Writes
    # ------------------------
    def _clean(self, data: Dict[str, Any], *, creating: bool, item=None, site_id: str) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise ValidationError("Payload must be an object")

        ignored = sorted(set(data) - set(self.spec.fields))
        if ignored:
            current_app.logger.debug("Ignoring non-writable %s fields: %s", self.spec.name, ignored)

        cleaned = validate_payload(self.spec, data)

        missing = [
            name for name in self.spec.required
            if (creating and name not in cleaned) or (name in cleaned and cleaned[name] in (None, ""))
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        if self.spec.prepare is not None:
            cleaned = self.spec.prepare(cleaned, item, site_id)

        return cleaned

    def _lock_site(self, site_id: str) -> None:
        # Serialises featured-flag writers of one site until commit.
        db.session.execute(
            select(Site.id).where(Site.id == site_id).with_for_update()
        ).scalar_one_or_none()

    def _guard_feature_cap(self, site_id: str, item, wants_featured: bool) -> None:
        field = self.spec.featured_field
        if not field or not wants_featured:
            return

        # Already featured and counted: writing it again cannot grow the count.
        if item is not None and getattr(item, field) and item.deleted_at is None:
            return

        cap = current_app.config["HOMEPAGE_FEATURE_CAP"]
        self._lock_site(site_id)

        query = self._query(site_id).filter(getattr(self.model, field).is_(True))
        if item is not None:
            query = query.filter(self.model.id != item.id)

        if query.count() >= cap:
            raise CapExceeded(
                f"At most {cap} {self.spec.name} can be shown on the homepage",
                cap=cap,
            )

    def _recheck_feature_cap(self, site_id: str) -> None:
        if not self.spec.featured_field:
            return
        db.session.flush()
        cap = current_app.config["HOMEPAGE_FEATURE_CAP"]
        if self.featured_count(site_id) > cap:
            raise CapExceeded(
                f"At most {cap} {self.spec.name} can be shown on the homepage",
                cap=cap,
            )

    def create(self, site_id: str, data: Dict[str, Any]):
        cleaned = self._clean(data, creating=True, site_id=site_id)

        item = self.model()
        item.site_id = site_id
        for name, value in cleaned.items():
            setattr(item, name, value)

        with transactional():
            if self.spec.featured_field:
                self._guard_feature_cap(site_id, None, bool(cleaned.get(self.spec.featured_field)))

            db.session.add(item)
            db.session.flush()  # ensures item.id is available
            self._recheck_feature_cap(site_id)

            log_action(
                action=f"{self.spec.entity_type}.create",
                entity_type=self.spec.entity_type,
                entity_id=item.id,
                payload={"fields": sorted(cleaned)},
                site_id=site_id,
            )

        current_app.logger.info("Created %s %s for site %s", self.spec.entity_type, item.id, site_id)
        return item

    def update(self, item_id: str, partial: Dict[str, Any], site_id: str):
        item = self.get(item_id, site_id)
        cleaned = self._clean(partial, creating=False, item=item, site_id=site_id)

        changed_fields: list[str] = []

        with transactional():
            if self.spec.featured_field and self.spec.featured_field in cleaned:
                self._guard_feature_cap(site_id, item, bool(cleaned[self.spec.featured_field]))

            for name, value in cleaned.items():
                if getattr(item, name) != value:
                    setattr(item, name, value)
                    changed_fields.append(name)

            self._recheck_feature_cap(site_id)

            if changed_fields:
                log_action(
                    action=f"{self.spec.entity_type}.update",
                    entity_type=self.spec.entity_type,
                    entity_id=item.id,
                    payload={"fields": changed_fields},
                    site_id=site_id,
                )

        return item

    def set_featured(self, item_id: str, featured: bool, site_id: str):
        if not self.spec.featured_field:
            raise ValidationError(f"{self.spec.name} items cannot be featured")
        return self.update(item_id, {self.spec.featured_field: featured}, site_id)

    def soft_delete(self, item_id: str, site_id: str):
        item = self.get(item_id, site_id, include_deleted=False)

        with transactional():
            item.soft_delete()
            log_action(
                action=f"{self.spec.entity_type}.delete",
                entity_type=self.spec.entity_type,
                entity_id=item.id,
                site_id=site_id,
            )

        return item

    def restore(self, item_id: str, site_id: str):
        item = self.get(item_id, site_id)
        if not item.is_deleted:
            return item

        with transactional():
            if self.spec.featured_field:
                self._guard_feature_cap(site_id, item, bool(getattr(item, self.spec.featured_field)))

            item.restore()
            self._recheck_feature_cap(site_id)

            log_action(
                action=f"{self.spec.entity_type}.restore",
                entity_type=self.spec.entity_type,
                entity_id=item.id,
                site_id=site_id,
            )

        return item

    def reorder(self, site_id: str, items: List[Dict[str, Any]]) -> BatchResult:
        field = self.spec.order_field
        if not field:
            raise ValidationError(f"{self.spec.name} items have no explicit display order")

        assert_reorder_payload(items, order_field=field)

        ids = [entry["id"] for entry in items]
        rows = {
            row.id: row
            for row in self._query(site_id, include_deleted=True).filter(self.model.id.in_(ids)).all()
        }

        with transactional():
            result = apply_order(rows, items, order_field=field)
            log_action(
                action=f"{self.spec.entity_type}.reorder",
                entity_type=self.spec.entity_type,
                entity_id="*",
                payload={"count": len(result.succeeded), "failed": list(result.failed)},
                site_id=site_id,
            )

        return result

    # ------------------------
    # Storage layout
    # ------------------------
    def folder_for(self, item, site: Optional[Site] = None) -> str:
        if self.spec.storage_category is None:
            raise ValidationError(f"{self.spec.name} items have no media folder")
        site = site or db.session.get(Site, item.site_id)
        return item_folder(site.slug, self.spec.storage_category(item), item.id)

    def permanent_delete(self, item_id: str, site_id: str) -> None:
        """
        Purge an archived item: storage objects first, then registry rows,
        then the record. If storage cleanup fails the record survives, so the
        files can still be found and removed later.
        """
        item = self.get(item_id, site_id)
        if not item.is_deleted:
            raise ValidationError("Only archived items can be permanently deleted")

        site = db.session.get(Site, site_id)
        referenced = [
            path for path in self.spec.image_paths(item)
            if path.startswith(f"{site.slug}/")
        ]

        folder = None
        paths: list[str] = []
        if self.spec.storage_category is not None:
            folder = self.folder_for(item, site)
            paths = [f"{folder}/{entry['name']}" for entry in get_storage().list(folder)]
        paths.extend(path for path in referenced if path not in paths)

        if paths:
            get_storage().remove(paths)

        with transactional():
            if folder is not None:
                registry.delete_by_prefix(site_id=site_id, prefix=folder)
            for path in referenced:
                registry.delete_by_path(path, site_id=site_id)

            db.session.delete(item)

            log_action(
                action=f"{self.spec.entity_type}.permanent_delete",
                entity_type=self.spec.entity_type,
                entity_id=item_id,
                payload={"removed_objects": len(paths)},
                site_id=site_id,
            )

        current_app.logger.info(
            "Permanently deleted %s %s (%s objects)", self.spec.entity_type, item_id, len(paths)
        )
