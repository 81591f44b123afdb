"""Business limits shared by the input models."""

# Pagination
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Product
PRODUCT_NAME_MIN_LENGTH = 3
PRODUCT_NAME_MAX_LENGTH = 100
PRODUCT_DESCRIPTION_MAX_LENGTH = 2000
PRODUCT_MAX_PRICE = 999999.99

# Category
CATEGORY_NAME_MIN_LENGTH = 3
CATEGORY_NAME_MAX_LENGTH = 100
CATEGORY_DESCRIPTION_MAX_LENGTH = 500
TOP_CATEGORIES_LIMIT = 10

# Deal
DEAL_MIN_DISCOUNT = 0
DEAL_MAX_DISCOUNT = 100

# User
USER_NAME_MAX_LENGTH = 50
USER_EMAIL_MAX_LENGTH = 255

# Image upload
ALLOWED_IMAGE_EXTENSIONS = ('jpg', 'jpeg', 'png', 'webp')
IMAGE_CONTENT_TYPES = {
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'png': 'image/png',
    'webp': 'image/webp',
}
DEFAULT_IMAGE_CONTENT_TYPE = 'image/jpeg'
UPLOAD_URL_EXPIRES_SECONDS = 86400
UPLOAD_URL_EXPIRES_LABEL = '24 hours'

# Identifiers
OBJECT_ID_PATTERN = r'^[0-9a-fA-F]{24}$'
EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
URL_PATTERN = r'^https?://[^\s/$.?#].[^\s]*$'
