"""Reflection service: the entry point handing out cached class schemas."""

from .cache import SCHEMAS, SchemaCache
from .config import ReflectionSettings, settings as default_settings
from .docstring import DocstringParser
from .introspection import ClassIntrospector
from .logging import get_logger
from .markers import MarkerReader
from .schema import ClassSchema
from .type_handling import qualified_name
from .validator_resolver import ValidatorClassNameResolver

logger = get_logger(__name__)


class ReflectionService:
    """Builds class schemas once and shares them.

    The schemas created here share the service's cache, so the materialized
    properties and methods of a class are built once for all of them.
    """

    def __init__(
        self,
        settings: ReflectionSettings | None = None,
        cache: SchemaCache | None = None,
    ):
        self.settings = settings or default_settings
        self.cache = (
            cache
            if cache is not None
            else SchemaCache(max_entries=self.settings.cache_max_entries)
        )
        self.introspector = ClassIntrospector(self.settings)
        self.marker_reader = MarkerReader()
        self.docstring_parser = DocstringParser()
        self.validator_resolver = ValidatorClassNameResolver(self.settings)

    def get_class_schema(self, class_or_name: type | str) -> ClassSchema:
        """Return the schema of a class, building it on first request.

        Args:
            class_or_name: The class, or its ``module.QualName`` identity

        Raises:
            UnknownClassError: If the class cannot be loaded
            ReflectionError: If the schema cannot be built
        """
        cls = self.introspector.load(class_or_name)
        class_name = qualified_name(cls)

        return self.cache.get_or_build(
            SCHEMAS, class_name, lambda: self._build_schema(cls)
        )

    def _build_schema(self, cls: type) -> ClassSchema:
        logger.debug("Building class schema", class_name=qualified_name(cls))
        return ClassSchema(
            cls,
            settings=self.settings,
            cache=self.cache,
            introspector=self.introspector,
            marker_reader=self.marker_reader,
            docstring_parser=self.docstring_parser,
            validator_resolver=self.validator_resolver,
        )
