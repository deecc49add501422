from sqlalchemy import Column, Text, LargeBinary, ForeignKey, BigInteger
from sqlalchemy.orm import relationship
from models.base import Base, BigIntegerKey


class CodeFile(Base):
    """A file attached to a snippet; always inserted with its parent."""
    __tablename__ = "code_file"

    id = Column(BigIntegerKey, primary_key=True, autoincrement=True)
    code_snippet_id = Column(BigInteger, ForeignKey("code_snippet.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    content = Column(LargeBinary, nullable=False)

    code_snippet = relationship("CodeSnippet", back_populates="files")
