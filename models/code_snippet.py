from sqlalchemy import Column, String, Text, Boolean, DateTime, Enum, ForeignKey, BigInteger
from sqlalchemy.orm import relationship
from models.base import Base, BigIntegerKey, Language


class CodeSnippet(Base):
    """
    One migrated CouchDB snippet document.

    Field Mapping:
    - _id -> slug (unique, resume key)
    - language -> language (normalized, see ingestion.transformers.normalizer)
    - title -> title (NUL bytes stripped)
    - public -> public
    - owner -> user_id (via profile.snippets_api_id, NULL when unknown)
    - created / modified -> created / modified (offset-aware)
    """
    __tablename__ = "code_snippet"

    id = Column(BigIntegerKey, primary_key=True, autoincrement=True)
    slug = Column(String(255), nullable=False, unique=True)
    language = Column(
        Enum(
            Language,
            name="language",
            values_callable=lambda enum_cls: [member.value for member in enum_cls]
        ),
        nullable=False
    )
    title = Column(Text, nullable=False)
    public = Column(Boolean, nullable=False)
    user_id = Column(BigInteger, ForeignKey("profile.user_id"), nullable=True, index=True)
    created = Column(DateTime(timezone=True), nullable=False)
    modified = Column(DateTime(timezone=True), nullable=False)

    files = relationship("CodeFile", back_populates="code_snippet", order_by="CodeFile.id")
