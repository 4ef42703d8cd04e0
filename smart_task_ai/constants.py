"""Central constants for Streamlit session state keys and defaults."""

SS_TASKS: str = "tasks"
SS_AUTH_SESSION: str = "auth_session"
SS_TASK_FILTER: str = "task_filter"
SS_EXPANDED_TASKS: str = "expanded_tasks"
SS_TASK_FORM: str = "task_form"
SS_AUTH_MANAGER: str = "auth_manager"
SS_FLASH_MESSAGE: str = "flash_message"

AI_INPUT_KEY: str = "ai_input"
AI_RESPONSE_KEY: str = "ai_response"
AI_DAILY_INSIGHTS_KEY: str = "ai_daily_insights"

PLANNER_DATE_KEY: str = "planner_date"
NEW_SUBTASK_TITLE_KEY: str = "new_subtask_title"
AUTH_EMAIL_KEY: str = "auth_email"
AUTH_PASSWORD_KEY: str = "auth_password"

FILTER_ALL: str = "all"

STREAK_MAX_DAYS: int = 30
WEEKLY_WINDOW_DAYS: int = 7
HIGH_PRIORITY_PLANNER_LIMIT: int = 3
OVERDUE_PLANNER_LIMIT: int = 3
RECENT_TASKS_LIMIT: int = 5
DAY_OVERLOAD_THRESHOLD: int = 5
HIGH_EFFORT_THRESHOLD: int = 4

EFFORT_LABELS: dict[int, str] = {
    1: "Very Easy",
    2: "Easy",
    3: "Medium",
    4: "Hard",
    5: "Very Hard",
}
