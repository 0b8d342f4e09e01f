# lockbox/app/core/constants.py
# Closed label set for Lockbox.category. A missing category means "uncategorized".
CATEGORIES = (
    "Passwords",
    "Financial",
    "Personal",
    "Work",
    "Social",
    "Gaming",
    "Other",
)

# Version stamped on export blobs
EXPORT_FORMAT_VERSION = "2.0.0"
