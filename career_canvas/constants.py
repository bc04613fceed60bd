# career_canvas/constants.py
class ErrorMessages:
    AUTH_REQUIRED = "Authentication required"
    INVALID_TOKEN = "Invalid or expired token"
    AUTH_FAILED = "Authentication failed"
    CODE_REQUIRED = "Authorization code is required"
    MENTOR_NOT_FOUND = "Mentor profile not found"
    PROFILE_UPDATE_NOT_FOUND = "Cannot update: mentor profile not found"
    STORY_NOT_FOUND = "Story not found"
    PREFERENCES_NOT_FOUND = "No preferences found for user"
    UNAUTHORIZED_MENTOR = "You can only delete your own mentor profile"
    UNAUTHORIZED_STORY = "You can only modify your own stories"
    DUPLICATE_PROFILE = "You are already registered as a mentor"
    DUPLICATE_PREFERENCES = "Mentorship preferences were saved concurrently, please retry"
    INVALID_MENTOR_ID = "Invalid mentor ID format"
    INVALID_STORY_ID = "Invalid story ID format"
    MENTOR_ID_REQUIRED = "Mentor ID is required"
    STORY_ID_REQUIRED = "Story ID is required"
    PROFILE_FIELDS_REQUIRED = "Missing required fields: name, title, department, bio, and skills are required"
    STORY_FIELDS_REQUIRED = "Title, content, and category are required"
    MENTORSHIP_TYPE_REQUIRED = "Validation failed: mentorshipType is required"
    FETCH_MENTORS_FAILED = "Failed to fetch mentors"
    SEEDING_DISABLED = "Seeding is disabled on this deployment"
    INTERNAL = "Internal server error"


class BusinessRules:
    MAX_BIO_LENGTH = 1000
    MIN_EXPERIENCE = 0
    MAX_EXPERIENCE = 50
    MIN_RATING = 0.0
    MAX_RATING = 5.0
    DEFAULT_RATING = 5.0
    LAST_ACTIVE_WINDOW_DAYS = 7

    DEFAULT_SORT_FIELD = "rating"
    DEFAULT_SORT_ORDER = "desc"
    # Public sort key -> Mentor column attribute
    SORTABLE_FIELDS = {
        "name": "name",
        "rating": "rating",
        "experience": "experience",
        "lastActive": "last_active",
        "menteeCount": "mentee_count",
        "createdAt": "created_at",
    }

    AVAILABILITY_STATES = ("available", "limited", "busy")

    # Suggested set shown by the profile form; department itself stays free text
    DEPARTMENTS = (
        "Engineering", "Product", "Marketing", "Design", "Analytics",
        "Sales", "Operations", "Finance", "HR", "Legal",
    )

    # Requester interests used for ranking when no preferences are saved
    DEFAULT_INTERESTS = ("career-growth", "technical-skills", "leadership")
