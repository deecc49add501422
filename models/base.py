from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import declarative_base
import enum

Base = declarative_base()

# BIGINT surrogate keys; SQLite only autoincrements INTEGER PRIMARY KEY
BigIntegerKey = BigInteger().with_variant(Integer, "sqlite")


# ============================================================================
# ENUMS
# ============================================================================

class Language(str, enum.Enum):
    """Closed vocabulary of snippet languages"""
    ASSEMBLY = "assembly"
    ATS = "ats"
    BASH = "bash"
    C = "c"
    CLOJURE = "clojure"
    COBOL = "cobol"
    COFFEESCRIPT = "coffeescript"
    CPP = "cpp"
    CRYSTAL = "crystal"
    CSHARP = "csharp"
    D = "d"
    ELIXIR = "elixir"
    ELM = "elm"
    ERLANG = "erlang"
    FSHARP = "fsharp"
    GO = "go"
    GROOVY = "groovy"
    HASKELL = "haskell"
    IDRIS = "idris"
    JAVA = "java"
    JAVASCRIPT = "javascript"
    JULIA = "julia"
    KOTLIN = "kotlin"
    LUA = "lua"
    MERCURY = "mercury"
    NIM = "nim"
    OCAML = "ocaml"
    PERL = "perl"
    PHP = "php"
    PYTHON = "python"
    RAKU = "raku"
    RUBY = "ruby"
    RUST = "rust"
    SCALA = "scala"
    SWIFT = "swift"
    TYPESCRIPT = "typescript"
    PLAINTEXT = "plaintext"
