from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from sqlalchemy import CheckConstraint
from zelene.extensions import db, login_manager
from zelene.utils.helpers import utcnow

# Keep simple text+CHECK for evolvable roles (no DB enum migration pain)
ROLE_MEMBER = "MEMBER"
ROLE_ADMIN = "ADMIN"
ROLE_TENANT_ADMIN = "TENANT_ADMIN"
ROLE_CHOICES = (ROLE_MEMBER, ROLE_ADMIN, ROLE_TENANT_ADMIN)
ADMIN_ROLES = (ROLE_ADMIN, ROLE_TENANT_ADMIN)

class User(db.Model, UserMixin):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(20), nullable=False, unique=True)
    email = db.Column(db.String(255), nullable=False, unique=True)
    name = db.Column(db.String(255), nullable=True)
    image = db.Column(db.String(512), nullable=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_MEMBER, server_default=ROLE_MEMBER)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    joined = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    profile = db.relationship("Profile", uselist=False, back_populates="user", cascade="all, delete-orphan")
    social = db.relationship("Social", uselist=False, back_populates="user", cascade="all, delete-orphan")
    posts = db.relationship("Post", back_populates="created_by", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint(
            "role IN ('MEMBER','ADMIN','TENANT_ADMIN')",
            name="ck_users_role_valid",
        ),
    )

    # helpers
    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def get_id(self) -> str:
        return str(self.id)

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


class Profile(db.Model):
    __tablename__ = "profiles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    bio = db.Column(db.String(500), nullable=True)
    location = db.Column(db.String(100), nullable=True)
    current_learning = db.Column(db.String(200), nullable=True)
    available_for = db.Column(db.String(200), nullable=True)
    skills = db.Column(db.String(200), nullable=True)
    current_project = db.Column(db.String(200), nullable=True)
    pronouns = db.Column(db.Boolean, nullable=True)
    work = db.Column(db.String(200), nullable=True)
    education = db.Column(db.String(200), nullable=True)

    user = db.relationship("User", back_populates="profile")


class Social(db.Model):
    __tablename__ = "socials"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    website = db.Column(db.String(512), nullable=True)
    twitter = db.Column(db.String(512), nullable=True)
    github = db.Column(db.String(512), nullable=True)
    linkedin = db.Column(db.String(512), nullable=True)
    facebook = db.Column(db.String(512), nullable=True)

    user = db.relationship("User", back_populates="social")


@login_manager.user_loader
def load_user(user_id: str):
    try:
        return db.session.get(User, int(user_id))
    except Exception:
        return None
