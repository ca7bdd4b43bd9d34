"""Languages offered by the review UI."""
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Language:
    """A selectable source language."""
    id: str
    name: str
    extension: str


SUPPORTED_LANGUAGES = (
    Language("javascript", "JavaScript", "js"),
    Language("typescript", "TypeScript", "ts"),
    Language("python", "Python", "py"),
    Language("java", "Java", "java"),
    Language("cpp", "C++", "cpp"),
    Language("c", "C", "c"),
    Language("csharp", "C#", "cs"),
    Language("go", "Go", "go"),
    Language("rust", "Rust", "rs"),
    Language("php", "PHP", "php"),
    Language("ruby", "Ruby", "rb"),
    Language("swift", "Swift", "swift"),
    Language("kotlin", "Kotlin", "kt"),
    Language("sql", "SQL", "sql"),
    Language("html", "HTML", "html"),
    Language("css", "CSS", "css"),
)


def list_languages() -> list[dict[str, str]]:
    """Return the supported languages as plain dicts."""
    return [asdict(language) for language in SUPPORTED_LANGUAGES]
