"""Constants for the S3 COSI driver."""

# Driver identity
DEFAULT_DRIVER_NAME = "cosi.huawei.com"
CONTROLLER = "s3-cosi-driver"

# Account secret data keys
SECRET_ACCESS_KEY = "accessKey"
SECRET_SECRET_KEY = "secretKey"
SECRET_ENDPOINT = "endpoint"
SECRET_ROOT_CA = "rootCA"

# Credential keys handed back on grant
CRED_ACCESS_KEY_ID = "accessKeyID"
CRED_ACCESS_SECRET_KEY = "accessSecretKey"
CRED_ENDPOINT = "endpoint"

# BucketClass / BucketAccessClass parameters
PARAM_ACCOUNT_SECRET_NAME = "accountSecretName"
PARAM_ACCOUNT_SECRET_NAMESPACE = "accountSecretNamespace"
PARAM_BUCKET_POLICY_MODEL = "bucketPolicyModel"
PARAM_BUCKET_ACL = "bucketACL"
PARAM_BUCKET_LOCATION = "bucketLocation"

# Bucket policy models
POLICY_MODEL_RW = "rw"
POLICY_MODEL_RO = "ro"
POLICY_MODELS = frozenset({POLICY_MODEL_RW, POLICY_MODEL_RO})

# Protocols
PROTOCOL_S3 = "s3"

# Authentication types
AUTH_TYPE_UNKNOWN = "UnknownAuthenticationType"
AUTH_TYPE_KEY = "Key"
AUTH_TYPE_IAM = "IAM"

# Keyed lock pool size
KEY_LOCK_SIZE = 100

# S3 client
S3_DEFAULT_REGION = "us-east-1"
S3_HTTP_TIMEOUT_SECONDS = 200

# User client types
USER_CLIENT_POE = "POE"

# Operation names (metrics labels, log fields)
OP_CREATE_BUCKET = "create_bucket"
OP_DELETE_BUCKET = "delete_bucket"
OP_GRANT_BUCKET_ACCESS = "grant_bucket_access"
OP_REVOKE_BUCKET_ACCESS = "revoke_bucket_access"

# User-management endpoint
POE_PORT = 9443
POE_URI = "/poe/rest"
POE_TIMEOUT_SECONDS = 60
