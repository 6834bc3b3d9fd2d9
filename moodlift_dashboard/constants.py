TAB_OPTIONS = [
    "Progress",
    "Activity",
    "Consultants",
]

THEME = {
    "text_main": "#2d2540",
    "text_soft": "#6f6585",
    "border": "#d9d0e8",
    "plot_grid": "#ece6f5",
    "accent": "#7c5cbf",
    "accent_soft": "#b9a6e0",
}

# Empty day first, then increasing activity.
HEATMAP_COLORSCALE = [
    (0.0, "#ebedf0"),
    (0.25, "#c6b5ea"),
    (0.5, "#9f85d8"),
    (0.75, "#7c5cbf"),
    (1.0, "#4e3586"),
]

WEEKDAY_ROW_LABELS = ["Mon", "", "Wed", "", "Fri", "", "Sun"]

ACHIEVEMENT_ICONS = {
    "First Steps": "🌱",
    "Week Warrior": "🔥",
    "Gratitude Guru": "🌻",
    "Breath Master": "🌬️",
    "Mindful Maven": "🧘",
    "Affirmation Ace": "💬",
}

CAROUSEL_SKELETON_COUNT = 3
CAROUSEL_COLUMNS = 3
EMPTY_CONSULTANTS_TITLE = "Connect with Certified Therapists"
EMPTY_CONSULTANTS_BODY = "Our certified therapists will appear here soon. Check back shortly."
CONSULTANT_NAME_FALLBACK = "Consultant"
CONSULTANT_TITLE_FALLBACK = "Therapist"
BOOK_NOW_LABEL = "Book Now"
DETAILS_LABEL = "Details"
