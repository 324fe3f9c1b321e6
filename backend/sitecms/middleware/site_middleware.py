from flask import request, g

from sitecms.domain.exceptions import NotFound, ValidationError
from sitecms.models.site import Site

# Endpoints reachable without a site context.
SITE_EXEMPT_ENDPOINTS = {
    "static",
    "openapi_cms",
    "media_file",
    "v1.health_check",
    "v1.login",
    "v1.refresh",
    "v1.me",
}
SITE_EXEMPT_BLUEPRINTS = {"swagger_ui"}


def site_middleware(app):
    @app.before_request
    def load_site():
        g.current_site = None

        if request.endpoint is None or request.method == "OPTIONS":
            return None

        if (
            request.endpoint in SITE_EXEMPT_ENDPOINTS
            or request.blueprint in SITE_EXEMPT_BLUEPRINTS
        ):
            return None

        site_id = request.headers.get("X-Site-ID")
        if not site_id:
            raise ValidationError("X-Site-ID header is missing")

        site = Site.query.filter_by(id=site_id, is_active=True).first()
        if not site:
            raise NotFound("Site not found")

        # Attach site to global context
        g.current_site = site
