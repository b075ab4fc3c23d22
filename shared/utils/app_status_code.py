class AppStatusCode:
    # Success
    OPERATION_SUCCESSFUL = "100"
    DATA_RETRIEVED_SUCCESSFULLY = "101"
    CREATED_SUCCESSFULLY = "102"
    UPDATED_SUCCESSFULLY = "103"
    DELETED_SUCCESSFULLY = "104"

    # Generic failures
    OPERATION_FAILED = "200"
    OPERATION_ERROR = "201"
    INVALID_INPUT = "202"
    REQUIRED_VALIDATION_ERROR = "203"
    DUPLICATE_ADD_ERROR = "204"
    NOT_FOUND_ERROR = "205"
    INVALID_STATUS_TRANSITION = "206"
    DELETE_RESTRICTED = "207"

    # Authentication
    AUTHENTICATION_CREDENTIALS_INVALID = "300"
    AUTHENTICATION_USER_INVALID = "301"
    AUTHENTICATION_USER_INACTIVE = "302"
    AUTHENTICATION_TOKEN_INVALID = "303"
    AUTHENTICATION_TOKEN_EXPIRED = "304"
    AUTHENTICATION_SESSION_TIMEOUT = "305"
    AUTHENTICATION_UNAUTHORIZED_ACCESS = "306"
    USER_EMAIL_IS_UNIQUE = "307"

    # QuickBooks
    QUICKBOOKS_CONFIG_ERROR = "400"
    QUICKBOOKS_API_ERROR = "401"
    QUICKBOOKS_NOT_CONNECTED = "402"
    QUICKBOOKS_NOT_SYNCED = "403"
