"""Marketplace-wide enumerations, labels and limits"""

# User types
USER_TYPES = ("expert", "client", "both")
EXPERT_USER_TYPES = ("expert", "both")
CLIENT_USER_TYPES = ("client", "both")

# Expert availability
AVAILABILITY_LABELS = {
    "available": "가능",
    "busy": "바쁨",
    "unavailable": "불가",
}

# Project lifecycle
PROJECT_STATUS_LABELS = {
    "draft": "임시저장",
    "open": "모집중",
    "in_progress": "진행중",
    "completed": "완료",
    "cancelled": "취소됨",
}

# Status moves a project owner may make directly; the rest are driven by contracts
PROJECT_OWNER_TRANSITIONS = {
    "draft": ("open", "cancelled"),
    "open": ("cancelled",),
}

# Proposal lifecycle
PROPOSAL_STATUS_LABELS = {
    "pending": "검토중",
    "accepted": "수락됨",
    "rejected": "거절됨",
    "withdrawn": "철회됨",
}

# Contract lifecycle
CONTRACT_STATUS_LABELS = {
    "pending_payment": "결제 대기",
    "in_progress": "진행중",
    "pending_approval": "승인 대기",
    "completed": "완료",
    "disputed": "분쟁중",
    "cancelled": "취소됨",
}

DISPUTABLE_CONTRACT_STATUSES = ("in_progress", "pending_approval")

# Messaging
MESSAGE_PREVIEW_LENGTH = 50

# Notifications
NOTIFICATION_TYPES = (
    "message",
    "proposal_received",
    "proposal_accepted",
    "proposal_rejected",
    "project_update",
)
NOTIFICATION_LIST_LIMIT = 50

# Platform fee rates (fraction of the agreed amount)
PLATFORM_FEE = {
    "EXPERT_MIN": 0.0,
    "EXPERT_MAX": 0.10,
    "CLIENT_MIN": 0.10,
    "CLIENT_MAX": 0.15,
}

# Pagination defaults
PAGINATION = {
    "DEFAULT_PAGE": 1,
    "DEFAULT_LIMIT": 12,
    "MAX_LIMIT": 50,
}

# File upload limits
FILE_UPLOAD = {
    "MAX_FILE_SIZE": 10 * 1024 * 1024,  # 10MB
    "ALLOWED_IMAGE_TYPES": ("image/jpeg", "image/png", "image/webp", "image/gif"),
    "ALLOWED_DOCUMENT_TYPES": (
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ),
}

UPLOAD_BUCKETS = ("message-attachments", "portfolio", "avatars", "project-attachments")

# Expert categories (16), grouped
EXPERT_CATEGORY_GROUPS = {
    "TECHNICAL": {
        "label": "테크니컬",
        "categories": ["technical_designer", "pattern_maker", "3d_designer", "cad_specialist"],
    },
    "PRODUCTION": {
        "label": "프로덕션",
        "categories": ["sample_maker", "seamstress", "knit_specialist", "fitting_specialist"],
    },
    "CREATIVE": {
        "label": "크리에이티브",
        "categories": ["fashion_designer", "textile_designer", "graphic_designer", "illustrator"],
    },
    "MEDIA": {
        "label": "미디어",
        "categories": ["photographer", "model", "stylist", "videographer"],
    },
}

CATEGORY_LABELS = {
    # Technical
    "technical_designer": "테크니컬 디자이너",
    "pattern_maker": "패턴 메이커",
    "3d_designer": "3D 디자이너",
    "cad_specialist": "CAD 전문가",
    # Production
    "sample_maker": "샘플리스트",
    "seamstress": "봉제사",
    "knit_specialist": "니트 전문가",
    "fitting_specialist": "가봉사",
    # Creative
    "fashion_designer": "패션 디자이너",
    "textile_designer": "텍스타일 디자이너",
    "graphic_designer": "그래픽 디자이너",
    "illustrator": "일러스트레이터",
    # Media
    "photographer": "포토그래퍼",
    "model": "모델",
    "stylist": "스타일리스트",
    "videographer": "비디오그래퍼",
}

CATEGORY_DESCRIPTIONS = {
    "technical_designer": "기술적 디테일, 스펙 시트, 생산 지시서 관리",
    "pattern_maker": "의류 패턴 설계 및 제작, 그레이딩",
    "3d_designer": "CLO3D, Browzwear, Marvelous Designer 전문",
    "cad_specialist": "Gerber, Optitex, Lectra 등 CAD 시스템 전문",
    "sample_maker": "샘플 의류 제작, 프로토타입 개발",
    "seamstress": "전문 봉제, 완봉, 특수 봉제 기술",
    "knit_specialist": "니트웨어 전문 제작 및 개발",
    "fitting_specialist": "가봉 및 피팅 보정 전문",
    "fashion_designer": "의류 디자인, 컬렉션 개발",
    "textile_designer": "원단 디자인, 프린트 패턴 개발",
    "graphic_designer": "브랜딩, 로고, 마케팅 그래픽",
    "illustrator": "패션 일러스트레이션, 도식화",
    "photographer": "패션 사진, 룩북, 캠페인 촬영",
    "model": "룩북, 커머셜, 피팅 모델",
    "stylist": "패션 스타일링, 코디네이션",
    "videographer": "패션 영상, 캠페인 비디오 제작",
}

EXPERT_CATEGORIES = tuple(CATEGORY_LABELS.keys())

# Expert listing sort options
SORT_LABELS = {
    "recommended": "추천순",
    "rating": "평점순",
    "reviews": "리뷰 많은순",
    "latest": "최신순",
    "price_low": "가격 낮은순",
    "price_high": "가격 높은순",
}

LOCATIONS = (
    "서울 전체",
    "서울 강남",
    "서울 성수",
    "서울 홍대/합정",
    "서울 동대문",
    "서울 기타",
    "경기",
    "인천",
    "부산",
    "대구",
    "기타 지역",
    "원격 작업 가능",
)


def category_group(category: str):
    """Return the group key (e.g. "TECHNICAL") a category belongs to"""
    for group, info in EXPERT_CATEGORY_GROUPS.items():
        if category in info["categories"]:
            return group
    return None
