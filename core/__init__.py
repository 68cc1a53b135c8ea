"""StudyDesk core library — data model, Pomodoro timer, storage and stats.

Public API re-exports for convenient imports:
    from core import PomodoroTimer, ManualScheduler, LocalStore, ...
"""

# Workspace & paths
from core.workspace import (
    workspace_root,
    get_user_timezone,
    today_local,
    today_str,
    config_path,
    local_store_path,
)

# Configuration & logging
from core.config import Config, load_config, save_config
from core.logger import setup_logging

# Errors
from core.errors import NotFoundError, StudyDeskError, ValidationError

# File I/O
from core.fileio import (
    read_json,
    read_yaml,
    replace_file,
    exclusive_lock,
    write_json_atomic,
    write_yaml_atomic,
)

# Date helpers
from core.dateutils import (
    format_clock,
    format_hours_minutes,
    format_time_to_display_time,
    calculate_duration,
    days_left,
    format_due_date,
    current_week_dates,
    current_month_dates,
)

# Validation
from core.validation import (
    validate_user,
    validate_subject,
    validate_task,
    validate_study_session,
    validate_study_time_record,
    validate_timer_settings,
)

# Timer
from core.scheduling import AsyncioScheduler, ManualScheduler
from core.pomodoro import PomodoroTimer, logging_notifier

# Storage
from core.local_store import LocalStore, STORAGE_KEYS
from core.storage import MemStorage
from core.entities import (
    DEFAULT_USER,
    load_user,
    SubjectCollection,
    TaskCollection,
    ScheduleCollection,
    StudyRecordCollection,
)

# Stats
from core.stats import compile_stats

# Models
from core.models import (
    TimerMode,
    TimerSettings,
    TimerSession,
    User,
    Subject,
    Task,
    StudySession,
    StudyTimeRecord,
    StatsSummary,
)
