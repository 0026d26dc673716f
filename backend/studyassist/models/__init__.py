from studyassist.models.card import (
    Card,
    CardCreate,
    CardUpdate,
    RatingOption,
    RatingRequest,
    RatingResult,
)
from studyassist.models.material import (
    Material,
    MaterialCreate,
    MaterialMove,
    MaterialReviewResult,
    MaterialStatus,
    MaterialUpdate,
)
from studyassist.models.preferences import (
    PreferencesUpdate,
    PreferencesView,
    SessionDurationView,
    UserPreferences,
)
from studyassist.models.project import (
    Project,
    ProjectCreate,
    ProjectDetail,
    ProjectList,
    ProjectUpdate,
)
from studyassist.models.review import DueCard, DueMaterial, ReviewQueue, StudyOverview

__all__ = [
    "Card",
    "CardCreate",
    "CardUpdate",
    "DueCard",
    "DueMaterial",
    "Material",
    "MaterialCreate",
    "MaterialMove",
    "MaterialReviewResult",
    "MaterialStatus",
    "MaterialUpdate",
    "PreferencesUpdate",
    "PreferencesView",
    "Project",
    "ProjectCreate",
    "ProjectDetail",
    "ProjectList",
    "ProjectUpdate",
    "RatingOption",
    "RatingRequest",
    "RatingResult",
    "ReviewQueue",
    "SessionDurationView",
    "StudyOverview",
    "UserPreferences",
]
