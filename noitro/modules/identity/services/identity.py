"""
Anonymous identity issuance.

The browser's copy of an identity is authoritative; the ``users`` table is an
advisory mirror. Issuing never fails because of the store: when it cannot be
read or written the caller still gets an ephemeral identity.
"""
from typing import Optional, Tuple
import logging
import random
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from noitro.core.exceptions import NotFoundError
from noitro.core.schemas import Author
from noitro.db.session import utcnow
from noitro.modules.identity.models.user import User
from noitro.modules.identity.schemas.user import Identity

logger = logging.getLogger(__name__)

# Bí danh tiếng Việt cho nội trợ
NICKNAMES = [
    "Chị Mai Xinh",
    "Cô Hương Thơm",
    "Bà Lan Duyên",
    "Chị Hoa Tươi",
    "Cô Linh Đông",
    "Bà Thu Vàng",
    "Chị Nhung Mềm",
    "Cô Hạnh Ngọt",
    "Bà Phương Nồng",
    "Chị Oanh Vui",
    "Cô Trang Sạch",
    "Bà Bích Xanh",
    "Chị Thủy Trong",
    "Cô Kim Loại",
    "Bà Ngọc Quý",
    "Chị Hồng Tươi",
    "Cô Xuân Xanh",
    "Bà Hạ Mát",
    "Chị Thu Vàng",
    "Cô Đông Ấm",
    "Bà Thành Công",
    "Chị Yêu Đời",
    "Cô Hạnh Phúc",
    "Bà Bình An",
    "Chị Nấu Giỏi",
    "Cô Dọn Khéo",
    "Bà Trồng Rau",
    "Chị Bánh Ngon",
    "Cô Canh Đậm",
    "Bà Cơm Dẻo",
    "Chị Chăm Con",
    "Cô Yêu Chồng",
]

ANONYMOUS_NICKNAME = "Người dùng ẩn danh"
AVATAR_URL = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"
AVATAR_BACKGROUNDS = "ffeaa7,fab1a0,fd79a8,e17055,00b894,00cec9,6c5ce7,a29bfe"

def random_nickname() -> str:
    return random.choice(NICKNAMES)

def random_avatar() -> str:
    seed = random.randint(0, 999)
    return AVATAR_URL.format(seed=seed) + f"&backgroundColor={AVATAR_BACKGROUNDS}"

def fallback_avatar(user_id: str) -> str:
    return AVATAR_URL.format(seed=user_id)

def generate_identity(
    identity_id: Optional[str] = None,
    nickname: Optional[str] = None,
    avatar: Optional[str] = None,
) -> Identity:
    """Build a fresh identity without touching the store"""
    return Identity(
        id=identity_id or uuid.uuid4().hex,
        nickname=(nickname or "").strip() or random_nickname(),
        avatar=(avatar or "").strip() or random_avatar(),
        created_at=utcnow(),
    )

def get_user(db: Session, user_id: str) -> Optional[User]:
    """Get user by ID"""
    return db.query(User).filter(User.id == user_id).first()

def get_identity(db: Session, user_id: str) -> Identity:
    user = get_user(db, user_id)
    if not user:
        raise NotFoundError("Không tìm thấy người dùng")
    return Identity.model_validate(user)

def issue_identity(
    db: Session,
    existing_id: Optional[str] = None,
    nickname: Optional[str] = None,
    avatar: Optional[str] = None,
) -> Tuple[Identity, bool, bool]:
    """
    Return ``(identity, created, persisted)``.

    A stored identity matching ``existing_id`` is returned unchanged.
    Otherwise a new one is generated (keeping ``existing_id`` as its id when
    given) and mirrored to the store on a best-effort basis. When the store
    cannot be read the claimed id is dropped and a random one issued.
    """
    if existing_id:
        try:
            user = get_user(db, existing_id)
        except SQLAlchemyError as e:
            logger.warning(f"Identity store unavailable, issuing ephemeral identity: {e}")
            db.rollback()
            return generate_identity(None, nickname, avatar), True, False
        if user:
            return Identity.model_validate(user), False, True

    identity = generate_identity(existing_id, nickname, avatar)
    return identity, True, mirror_identity(db, identity)

def mirror_identity(db: Session, identity: Identity) -> bool:
    """Upsert an identity into the store; failures are logged, never raised."""
    try:
        user = get_user(db, identity.id)
        if not user:
            db.add(User(
                id=identity.id,
                nickname=identity.nickname,
                avatar=identity.avatar,
                created_at=identity.created_at,
            ))
            db.commit()
        return True
    except SQLAlchemyError as e:
        logger.error(f"Failed to mirror anonymous identity {identity.id}: {e}")
        db.rollback()
        return False

def ensure_user(
    db: Session,
    user_id: str,
    nickname: Optional[str] = None,
    avatar: Optional[str] = None,
) -> User:
    """
    Make sure a users row exists for an author inside the caller's transaction.

    Does not commit; the write that needs the row commits both together.
    """
    user = get_user(db, user_id)
    if user:
        return user

    logger.info(f"Creating identity record for author {user_id}")
    user = User(
        id=user_id,
        nickname=(nickname or "").strip() or ANONYMOUS_NICKNAME,
        avatar=(avatar or "").strip() or fallback_avatar(user_id),
    )
    db.add(user)
    db.flush()
    return user

def author_view(user: Optional[User], user_id: str) -> Author:
    """Public author card, with a placeholder when the record is missing"""
    if not user:
        return Author(id=user_id, nickname=ANONYMOUS_NICKNAME, avatar=fallback_avatar(user_id))
    return Author(
        id=user.id,
        nickname=user.nickname or ANONYMOUS_NICKNAME,
        avatar=user.avatar or fallback_avatar(user.id),
    )
