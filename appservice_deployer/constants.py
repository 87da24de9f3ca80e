from pathlib import Path

# ==========================================
# 1. Configuration Sources
# ==========================================
CONFIG_CREDENTIALS_FILE = "config_credentials.json"

ENV_CREDENTIALS_FILE = "APPSERVICE_TEST_CREDENTIALS_FILE"
ENV_TEST_ID = "APPSERVICE_TEST_ID"
ENV_LOCATION = "APPSERVICE_TEST_LOCATION"
ENV_PRICING_TIER = "APPSERVICE_TEST_PRICING_TIER"
ENV_MODE = "APPSERVICE_TEST_MODE"

AZURE_CREDENTIAL_ENV_VARS = {
    "azure_subscription_id": "AZURE_SUBSCRIPTION_ID",
    "azure_tenant_id": "AZURE_TENANT_ID",
    "azure_client_id": "AZURE_CLIENT_ID",
    "azure_client_secret": "AZURE_CLIENT_SECRET",
}

DEFAULT_LOCATION = "westeurope"
DEFAULT_PRICING_TIER = "Standard_S1"
DEFAULT_TEST_ID_PREFIX = "appsvc-git"

# Tier names accepted by the App Service SKU API, keyed by lowercase alias
PRICING_TIERS = {
    "free": "Free",
    "shared": "Shared",
    "basic": "Basic",
    "standard": "Standard",
    "premium": "Premium",
    "premiumv2": "PremiumV2",
    "premiumv3": "PremiumV3",
}

# ==========================================
# 2. Git Deployment
# ==========================================
GIT_EXECUTABLE = "git"
GIT_REMOTE_BRANCH = "master"
GIT_AUTHOR_NAME = "Jenkins"
GIT_AUTHOR_EMAIL = "jenkins@localhost"
COMMIT_MESSAGE_TEMPLATE = "Deploy ${BUILD_TAG}"
DEFAULT_BUILD_TAG = "jenkins-job-1"

# ==========================================
# 3. Readiness Polling
# ==========================================
APP_READY_TIMEOUT_SECONDS = 300
APP_READY_POLL_INTERVAL_SECONDS = 5
APP_READY_REQUEST_TIMEOUT_SECONDS = 30

# ==========================================
# 4. Sample Applications
# ==========================================
SAMPLE_APPS_DIR = Path(__file__).parent / "sample_apps"

APP_TYPE_NODEJS = "nodejs"
APP_TYPE_PHP = "php"
APP_TYPE_PYTHON = "python"

SAMPLE_APPS = {
    APP_TYPE_NODEJS: {
        "files": ["index.js", "package.json", "process.json"],
        "file_pattern": "*.js,*.json",
        "expected_content": "Hello NodeJS!",
        "php_version": None,
        "python_version": None,
    },
    APP_TYPE_PHP: {
        "files": ["index.php"],
        "file_pattern": "*.php",
        "expected_content": "Hello PHP!",
        "php_version": "5.6",
        "python_version": None,
    },
    APP_TYPE_PYTHON: {
        "files": ["main.py", "virtualenv_proxy.py", "requirements.txt", "web.3.4.config"],
        "file_pattern": "*.py,*.config,requirements.txt",
        "expected_content": "Hello, Python!",
        "php_version": None,
        "python_version": "3.4",
    },
}
