from zelene.extensions import db
from zelene.utils.helpers import utcnow

tags_on_posts = db.Table(
    "tags_on_posts",
    db.Column("post_id", db.Integer, db.ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    db.Column("tag_id", db.Integer, db.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Tag(db.Model):
    __tablename__ = "tags"

    id = db.Column(db.Integer, primary_key=True)
    # Always stored lowercased; uniqueness is therefore case-insensitive
    name = db.Column(db.String(50), nullable=False, unique=True)
    is_official = db.Column(db.Boolean, nullable=False, default=False, server_default=db.false())
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    posts = db.relationship("Post", secondary=tags_on_posts, back_populates="tags")

    @property
    def post_count(self) -> int:
        return len(self.posts)

    def __repr__(self) -> str:
        return f"<Tag id={self.id} name={self.name} official={self.is_official}>"


class RelatedPost(db.Model):
    __tablename__ = "related_posts"

    post_id = db.Column(db.Integer, db.ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    related_post_id = db.Column(db.Integer, db.ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)

    post = db.relationship("Post", foreign_keys=[post_id], back_populates="related_links")
    related_post = db.relationship("Post", foreign_keys=[related_post_id])


class Post(db.Model):
    __tablename__ = "posts"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    excerpt = db.Column(db.Text, nullable=False)
    content = db.Column(db.Text, nullable=False)  # Markdown

    view_count = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    like_count = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    comment_count = db.Column(db.Integer, nullable=False, default=0, server_default="0")

    # Derived from tags; see services.posts.derive_official
    is_official = db.Column(db.Boolean, nullable=False, default=False, server_default=db.false())
    priority = db.Column(db.Integer, nullable=False, default=0, server_default="0")

    created_by_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    published_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    created_by = db.relationship("User", back_populates="posts")
    tags = db.relationship("Tag", secondary=tags_on_posts, back_populates="posts", order_by="Tag.name")
    related_links = db.relationship(
        "RelatedPost",
        foreign_keys=[RelatedPost.post_id],
        back_populates="post",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.Index("ix_posts_feed_order", "is_official", "priority", "published_at"),
    )

    @property
    def related_posts(self):
        return [link.related_post for link in self.related_links]
