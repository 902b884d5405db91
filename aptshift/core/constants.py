# Collection names in the document store
BOOKINGS_COLLECTION = "bookings"
TIME_CHANGES_COLLECTION = "timeChanges"
CONVERSATIONS_COLLECTION = "conversations"
CLEANING_ASSIGNMENTS_COLLECTION = "cleaningAssignments"
USERS_COLLECTION = "users"

# Assumed time of a same-day check-in whose time is not set yet
DEFAULT_CHECKIN_TIME = "14:00"

# Cleaning must start at least this long after checkout and be done by the deadline
CLEANING_GAP_MINUTES = 30
CLEANING_DEADLINE = "14:00"
CHECKIN_CHECKOUT_BOUNDARY_HOUR = 14
