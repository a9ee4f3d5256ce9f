"""Core constants: store table names, RPC names, and shared literal values."""

# PostgREST tables
TABLE_INVITE_CODES = "invite_codes"
TABLE_VERIFICATION_REQUESTS = "verification_requests"
TABLE_API_TOKENS = "api_tokens"
TABLE_ADMINS = "admins"
TABLE_API_LOGS = "api_logs"

# Aggregation functions exposed by the store (POST /rest/v1/rpc/<name>)
RPC_ENDPOINT_COUNTS = "get_endpoint_counts"
RPC_TOOL_USAGE_COUNTS = "get_tool_usage_counts"
RPC_DAILY_REQUESTS = "get_daily_requests"
RPC_DAILY_ERROR_RATES = "get_daily_error_rates"
RPC_ACTIVE_USERS = "get_active_users"

# Edge functions (POST /functions/v1/<name>)
FUNCTION_SEND_VERIFICATION_EMAIL = "send-verification-email"
FUNCTION_SEND_TOKEN_EMAIL = "send-token-email"

# Key under scope["state"] where the access gate stores the resolved identity
IDENTITY_STATE_KEY = "identity"
