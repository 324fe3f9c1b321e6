# Import every model so metadata (create_all, Flask-Migrate) sees all tables.
from .site import Site
from .user import User
from .membership import SiteMembership, MEMBERSHIP_ROLES
from .revoked_token import RevokedToken
from .page import Page
from .block import Block
from .media_asset import MediaAsset
from .audit_log import AuditLog
from .vehicle import Vehicle
from .gallery_image import GalleryImage
from .program_event import ProgramEvent
from .repertoire_item import RepertoireItem
from .announcement import Announcement
