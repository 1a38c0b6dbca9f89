"""Constants for the Phrase sync tool."""

# Sync directions
DIRECTION_PUSH = "push"
DIRECTION_PULL = "pull"
SYNC_DIRECTIONS = (DIRECTION_PUSH, DIRECTION_PULL)

# Configuration
CONF_PROJECTS = "projects"
CONF_NAME = "name"
CONF_PROJECT_ID = "project_id"
CONF_LOCALE_PATH = "locale_path"
CONF_DEFAULT_LOCALE = "default_locale"

DEFAULT_CONFIG_FILE = "phrase.json"

# Environment variables set by the Azure Pipelines agent or the pipeline definition
ENV_PHRASE_TOKEN = "PHRASEAPP_TOKEN"
ENV_AZURE_TOKEN = "SYSTEM_ACCESSTOKEN"
ENV_AZURE_URI = "SYSTEM_TEAMFOUNDATIONCOLLECTIONURI"
ENV_AZURE_PROJECT_ID = "SYSTEM_TEAMPROJECTID"
ENV_AZURE_REPOSITORY_ID = "BUILD_REPOSITORY_ID"
ENV_SYNC_DIRECTION = "PHRASE_SYNC_DIRECTION"
ENV_REMOVE_UNMENTIONED_KEYS = "REMOVE_UNMENTIONED_KEYS"
ENV_GIT_USER_MAIL = "GIT_USER_MAIL"
ENV_GIT_USER_NAME = "GIT_USER_NAME"

# Phrase API
PHRASE_API_BASE_URL = "https://api.phraseapp.com/api/v2"
PHRASE_FILE_FORMAT = "nested_json"
PHRASE_PAGE_SIZE = 100

# Upload states
UPLOAD_STATE_PENDING = "pending"
UPLOAD_STATE_SUCCESS = "success"
UPLOAD_STATE_ERROR = "error"

# Upload poll defaults (milliseconds / number of queries)
DEFAULT_POLL_INTERVAL = 1000
DEFAULT_POLL_ATTEMPTS = 5

# Azure DevOps
AZURE_API_VERSION = "7.0"
AZURE_VOTE_APPROVED = 10
AZURE_MERGE_STRATEGY_SQUASH = "squash"

# Git / pull request
DEFAULT_GIT_USER_MAIL = "phrase@devops.com"
DEFAULT_GIT_USER_NAME = "Phrase Devops"
DEFAULT_BRANCH_NAME = "chore/phrase/update_i18n"
DEFAULT_TARGET_BRANCH = "master"
COMMIT_MESSAGE = "Update PhraseApp translations"
LOCALE_FILE_PATTERN = "*.json"
PULL_REQUEST_TITLE = "chore(phrase): automatic update of i18n files"
PULL_REQUEST_DESCRIPTION = "Automatic PhraseApp Update"
