"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

OTP_LENGTH = 6
OTP_TTL_MINUTES = 10
DEFAULT_COMPANY_NAME = "RIL Innovation Lab"
DEFAULT_POLL_SECONDS = 5
DEFAULT_SESSION_DAYS = 1

MSG_INVALID_OTP = "Invalid OTP. Please check and try again."
MSG_EXPIRED_OTP = "OTP has expired. Please request a new one."
MSG_OTP_VERIFIED = "OTP verified successfully"
MSG_OTP_SENT = "OTP sent successfully"
MSG_OTP_DELIVERY_UNCERTAIN = "OTP generated but email delivery may have failed"
MSG_MEMBER_NOT_FOUND = "Email not found. Please contact admin to register."
MSG_MEMBER_INACTIVE = "This account is inactive. Please contact admin."
