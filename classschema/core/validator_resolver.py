"""Resolution of validator names to validator implementations."""

from ..validation.validators import ValidatorInterface
from .config import ReflectionSettings, settings as default_settings
from .exceptions import NoSuchValidatorError, UnknownClassError
from .logging import get_logger
from .type_handling import load_class, normalize_class_name, qualified_name

logger = get_logger(__name__)


class ValidatorClassNameResolver:
    """Maps a validator name to the qualified name of its implementation.

    Dotted names (``app.validation.SlugValidator`` or ``app.validation:Slug``)
    are imported directly, with and without the ``Validator`` suffix. Short
    names (``NotEmpty``) are looked up in the configured validator
    namespaces as ``NotEmptyValidator``, then ``NotEmpty``.
    """

    SUFFIX = "Validator"

    def __init__(self, settings: ReflectionSettings | None = None):
        self.settings = settings or default_settings
        self._resolved: dict[str, str] = {}

    def resolve(self, validator_name: str) -> str:
        """Resolve a validator name.

        Args:
            validator_name: Short or dotted validator name

        Returns:
            Qualified class name of the validator implementation

        Raises:
            NoSuchValidatorError: If no validator implementation matches
        """
        if validator_name in self._resolved:
            return self._resolved[validator_name]

        for candidate in self._candidates(validator_name):
            try:
                cls = load_class(candidate)
            except UnknownClassError:
                continue
            if issubclass(cls, ValidatorInterface) and cls is not ValidatorInterface:
                class_name = qualified_name(cls)
                self._resolved[validator_name] = class_name
                logger.debug(
                    "Validator resolved",
                    validator=validator_name,
                    class_name=class_name,
                )
                return class_name

        raise NoSuchValidatorError(validator_name)

    def _candidates(self, validator_name: str) -> list[str]:
        name = normalize_class_name(validator_name)
        if not name:
            return []

        if "." in name:
            names = [name]
        else:
            names = [
                f"{namespace}.{name}"
                for namespace in self.settings.validator_namespaces
            ]

        candidates = []
        for candidate in names:
            if not candidate.endswith(self.SUFFIX):
                candidates.append(candidate + self.SUFFIX)
            candidates.append(candidate)
        return candidates
