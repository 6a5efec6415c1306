"""Constants for the Data Protection Application Operator."""

# API Group
API_GROUP = "oadp.openshift.io"
API_VERSION = "v1alpha1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_DPA = "DataProtectionApplication"
KIND_DPT = "DataProtectionTest"
PLURAL_DPA = "dataprotectionapplications"
PLURAL_DPT = "dataprotectiontests"

# Labels
LABEL_OADP_OPERATOR = "openshift.io/oadp"
LABEL_DPA_NAME = "dataprotectionapplication.name"
LABEL_SECRET_TYPE = f"{API_GROUP}/secret-type"
SECRET_TYPE_STS = "sts-credentials"

LABEL_APP_NAME = "app.kubernetes.io/name"
LABEL_APP_INSTANCE = "app.kubernetes.io/instance"
LABEL_APP_MANAGED_BY = "app.kubernetes.io/managed-by"
LABEL_APP_COMPONENT = "app.kubernetes.io/component"

# Annotations
ANNOTATION_RECONCILE_REQUESTED = f"{API_GROUP}/reconcile-requested-at"
ANNOTATION_AZURE_CLIENT_ID = "azure.workload.identity/client-id"

# Controller identity
CONTROLLER_NAME = "dpa-operator"
FIELD_MANAGER = CONTROLLER_NAME

# Condition Types and Reasons
COND_RECONCILED = "Reconciled"
REASON_COMPLETE = "Complete"
REASON_ERROR = "Error"
RECONCILE_COMPLETE_MESSAGE = "Reconcile complete"

# Event Reasons
EVENT_REASON_RECONCILE_STARTED = "ReconcileStarted"
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_VALIDATE_FAILED = "ValidateFailed"
EVENT_REASON_STS_SECRET_PROVISIONED = "STSSecretProvisioned"
EVENT_REASON_AZURE_WI_SECRET_RECONCILED = "AzureWorkloadIdentitySecretReconciled"
EVENT_REASON_UPLOAD_TEST_COMPLETED = "UploadTestCompleted"
EVENT_REASON_UPLOAD_TEST_FAILED = "UploadTestFailed"

# STS secrets
VELERO_AWS_SECRET_NAME = "cloud-credentials"
VELERO_GCP_SECRET_NAME = "cloud-credentials-gcp"
VELERO_AZURE_SECRET_NAME = "cloud-credentials-azure"
AZURE_WORKLOAD_IDENTITY_SECRET_NAME = "azure-workload-identity-env"
AWS_SECRET_KEY = "credentials"
GCP_SECRET_JSON_KEY = "service_account.json"
AZURE_SECRET_KEY = "azurekey"
AZURE_CLOUD_NAME = "AzurePublicCloud"
WEB_IDENTITY_TOKEN_PATH = "/var/run/secrets/openshift/serviceaccount/token"
VELERO_SERVICE_ACCOUNT = "velero"

# STS environment keys
ROLE_ARN_ENV_KEY = "ROLEARN"
SERVICE_ACCOUNT_EMAIL_ENV_KEY = "SERVICE_ACCOUNT_EMAIL"
PROJECT_NUMBER_ENV_KEY = "PROJECT_NUMBER"
POOL_ID_ENV_KEY = "POOL_ID"
PROVIDER_ID_ENV_KEY = "PROVIDER_ID"
CLIENT_ID_ENV_KEY = "CLIENTID"
TENANT_ID_ENV_KEY = "TENANTID"
SUBSCRIPTION_ID_ENV_KEY = "SUBSCRIPTIONID"

# Upload speed test
MAX_UPLOAD_TEST_BYTES = 200 * 1024 * 1024
DEFAULT_UPLOAD_TIMEOUT_SECONDS = 30.0
UPLOAD_TEST_KEY_PREFIX = "dpt-upload-test"

# DataProtectionTest phases
PHASE_IN_PROGRESS = "InProgress"
PHASE_COMPLETE = "Complete"
PHASE_FAILED = "Failed"
