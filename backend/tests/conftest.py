import io
import os

import pytest
from flask_jwt_extended import create_access_token
from PIL import Image

from sitecms import create_app
from sitecms.extensions import db
from sitecms.models.membership import SiteMembership
from sitecms.models.site import Site
from sitecms.models.user import User


@pytest.fixture
def app(tmp_path):
    """Application bound to an in-memory database and a temp storage root."""
    app = create_app(
        "testing",
        STORAGE_PROVIDER="local",
        STORAGE_LOCAL_PATH=str(tmp_path / "storage"),
        STORAGE_BUCKET="site-media",
        STORAGE_PUBLIC_BASE_URL="https://cdn.test/media",
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_site(app):
    def _make(slug, name=None):
        site = Site()
        site.slug = slug
        site.name = name or slug.title()
        db.session.add(site)
        db.session.commit()
        return site
    return _make


@pytest.fixture
def site(make_site):
    return make_site("autobazar")


@pytest.fixture
def other_site(make_site):
    return make_site("divadlo")


@pytest.fixture
def make_user(app):
    def _make(email, *, password="secret-pass", memberships=()):
        user = User()
        user.email = email
        user.full_name = email.split("@")[0]
        user.set_password(password)
        db.session.add(user)
        db.session.flush()

        for member_site, role in memberships:
            membership = SiteMembership()
            membership.user_id = user.id
            membership.site_id = member_site.id
            membership.role = role
            db.session.add(membership)

        db.session.commit()
        return user
    return _make


@pytest.fixture
def editor(make_user, site):
    return make_user("editor@autobazar.test", memberships=[(site, "editor")])


@pytest.fixture
def admin(make_user, site):
    return make_user("admin@autobazar.test", memberships=[(site, "admin")])


@pytest.fixture
def viewer(make_user, site):
    return make_user("viewer@autobazar.test", memberships=[(site, "viewer")])


@pytest.fixture
def auth_headers(app):
    def _headers(user, site=None):
        headers = {"Authorization": f"Bearer {create_access_token(identity=user.id)}"}
        if site is not None:
            headers["X-Site-ID"] = site.id
        return headers
    return _headers


@pytest.fixture
def image_bytes():
    """Build encoded test images; `noise=True` gives poorly compressible content."""
    def _make(width=64, height=48, fmt="PNG", noise=False, color=(200, 30, 30)):
        if noise:
            img = Image.frombytes("RGB", (width, height), os.urandom(width * height * 3))
        else:
            img = Image.new("RGB", (width, height), color)
        buffer = io.BytesIO()
        img.save(buffer, format=fmt)
        return buffer.getvalue()
    return _make
