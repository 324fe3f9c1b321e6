import mimetypes
import uuid
from werkzeug.utils import secure_filename

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
DEFAULT_EXTENSION = 'jpg'

def file_extension(filename):
    filename = secure_filename(filename or "")
    if '.' not in filename:
        return DEFAULT_EXTENSION
    return filename.rsplit('.', 1)[1].lower()

def allowed_file(filename):
    return file_extension(filename) in ALLOWED_EXTENSIONS

def guess_content_type(filename):
    content_type, _ = mimetypes.guess_type(filename or "")
    return content_type or "application/octet-stream"

def item_folder(site_slug, category, item_id):
    """
    Storage folder of a collection item:
    {site_slug}/{category}/{item_id}, category being e.g. "cars",
    "gallery/{category}" or "program/{category}".
    """
    return f"{site_slug}/{category.strip('/')}/{item_id}"

def main_image_path(folder, filename):
    # Fixed name so a new main image replaces the old one in place.
    return f"{folder}/main.{file_extension(filename)}"

def gallery_image_path(folder, filename):
    return f"{folder}/gallery-{uuid.uuid4().hex}.{file_extension(filename)}"
