"""Unit tests for native class reflection."""

import inspect

import pytest

from blog.controller import PostController
from blog.domain.model import Author, Post
from classschema.core.exceptions import UnknownClassError
from classschema.core.introspection import (
    MARKERS_ATTRIBUTE,
    ClassIntrospector,
    Visibility,
    evaluate_annotation,
    is_class_var_name,
    visibility_of,
)
from classschema.core.markers import Validate
from classschema.domain import AbstractEntity, ControllerInterface, DomainObject


class Registry:
    """Counters typed with names that do not resolve."""

    counters: "typing.ClassVar[MissingCounter]" = 0  # noqa: F821
    label: "MissingLabel" = ""  # noqa: F821


@pytest.fixture
def introspector():
    """Create a class introspector with default settings."""
    return ClassIntrospector()


class TestVisibility:
    """Test visibility derived from member names."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("title", Visibility.PUBLIC),
            ("__init__", Visibility.PUBLIC),
            ("_draft", Visibility.PROTECTED),
            ("__secret", Visibility.PRIVATE),
            ("_Post__secret", Visibility.PRIVATE),
        ],
    )
    def test_visibility_of(self, name, expected):
        """Test naming conventions for each visibility."""
        assert visibility_of(name, Post) is expected


class TestAnnotationEvaluation:
    """Test lenient evaluation of string annotations."""

    def test_evaluates_known_names(self):
        """Test that resolvable strings are evaluated."""
        assert evaluate_annotation("list[Post]", {"Post": Post}) == list[Post]

    def test_keeps_unresolvable_string(self):
        """Test that an unknown name is kept as written."""
        assert evaluate_annotation("Missing", {}) == "Missing"

    def test_passes_objects_through(self):
        """Test that evaluated annotations are returned unchanged."""
        assert evaluate_annotation(int, {}) is int

    @pytest.mark.parametrize(
        ("annotation", "expected"),
        [
            ("ClassVar[int]", True),
            ("typing.ClassVar[Missing]", True),
            ("'t.ClassVar'", True),
            ("list[ClassVar]", False),
            ("ClassVariable", False),
            ("Missing", False),
        ],
    )
    def test_class_var_name(self, annotation, expected):
        """Test recognition of ClassVar written in unresolved annotations."""
        assert is_class_var_name(annotation) is expected


class TestLoading:
    """Test resolving classes to reflect."""

    def test_load_by_name(self, introspector):
        """Test loading by dotted name."""
        assert introspector.load("blog.domain.model.Post") is Post

    def test_load_passes_classes_through(self, introspector):
        """Test that a class is returned unchanged."""
        assert introspector.load(Post) is Post

    @pytest.mark.parametrize("name", ["", "   ", "blog.domain.model.Nope"])
    def test_load_unknown(self, introspector, name):
        """Test that blank or unknown names fail."""
        with pytest.raises(UnknownClassError):
            introspector.load(name)


class TestPropertyReflection:
    """Test enumeration of annotated properties."""

    def test_properties_across_mro(self, introspector):
        """Test own properties come first, followed by inherited ones."""
        reflected = introspector.reflect(Post)
        names = [prop.name for prop in reflected.properties]

        assert names[0] == "title"
        assert names[-2:] == ["uid", "pid"]
        assert "_Post__secret" in names

    def test_property_details(self, introspector):
        """Test defaults, visibility and declaring class."""
        properties = {p.name: p for p in introspector.reflect(Post).properties}

        title = properties["title"]
        assert title.has_default is True
        assert title.default == ""
        assert title.annotation is str
        assert len(title.metadata) == 2
        assert title.declaring_class == "blog.domain.model.Post"

        comments = properties["comments"]
        assert comments.has_default is False
        assert comments.default is None

        assert properties["uid"].declaring_class == (
            "classschema.domain.model.DomainObject"
        )
        assert properties["_draft"].visibility is Visibility.PROTECTED
        assert properties["_Post__secret"].visibility is Visibility.PRIVATE

    def test_class_var_is_static(self, introspector):
        """Test that ClassVar properties are static."""
        properties = {p.name: p for p in introspector.reflect(Post).properties}

        assert properties["instances"].is_static is True
        assert properties["instances"].annotation is int
        assert properties["title"].is_static is False

    def test_unresolved_qualified_class_var_is_static(self, introspector):
        """Test a dotted ClassVar that does not evaluate is still static."""
        properties = {p.name: p for p in introspector.reflect(Registry).properties}

        assert properties["counters"].is_static is True
        assert properties["counters"].annotation == "typing.ClassVar[MissingCounter]"
        assert properties["label"].is_static is False

    def test_runtime_bases_are_skipped(self, introspector):
        """Test that ABC machinery is not reflected as members."""
        reflected = introspector.reflect(PostController)
        method_names = {method.name for method in reflected.methods}

        assert "__init_subclass__" not in method_names
        assert "__subclasshook__" not in method_names


class TestMethodReflection:
    """Test enumeration of methods and their parameters."""

    def test_methods_and_inherited_methods(self, introspector):
        """Test own methods come first, inherited ones follow."""
        methods = [m.name for m in introspector.reflect(Post).methods]

        assert methods[:3] == ["__init__", "add_comment", "get_title"]
        assert "get_uid" in methods

    def test_receiver_is_not_a_parameter(self, introspector):
        """Test that self and cls are dropped."""
        methods = {m.name: m for m in introspector.reflect(PostController).methods}

        assert [p.name for p in methods["update_action"].parameters] == [
            "post",
            "title",
        ]
        assert [p.name for p in methods["create"].parameters] == ["repository"]
        assert methods["route_name"].parameters == ()

    def test_static_and_class_methods(self, introspector):
        """Test that staticmethod and classmethod are static."""
        methods = {m.name: m for m in introspector.reflect(PostController).methods}

        assert methods["route_name"].is_static is True
        assert methods["create"].is_static is True
        assert methods["update_action"].is_static is False

    def test_constructor(self, introspector):
        """Test constructor detection."""
        methods = {m.name: m for m in introspector.reflect(Author).methods}

        assert not any(m.is_constructor for m in methods.values())
        controller_methods = {
            m.name: m for m in introspector.reflect(PostController).methods
        }
        assert controller_methods["__init__"].is_constructor is True

    def test_parameter_details(self, introspector):
        """Test annotation, defaults and kinds of parameters."""
        methods = {m.name: m for m in introspector.reflect(PostController).methods}

        repository, page_size = methods["__init__"].parameters
        assert repository.position == 0
        assert repository.has_default is False
        assert page_size.position == 1
        assert page_size.annotation is int
        assert page_size.default == 10

        tags, page = methods["list_action"].parameters
        assert tags.kind is inspect.Parameter.VAR_POSITIONAL
        assert tags.is_variadic is True
        assert page.kind is inspect.Parameter.KEYWORD_ONLY

    def test_markers_and_docstring(self, introspector):
        """Test decorator markers and docstrings are carried over."""
        methods = {m.name: m for m in introspector.reflect(PostController).methods}

        update = methods["update_action"]
        assert [marker.kind for marker in update.markers] == [
            "validate",
            "validate",
            "ignore_validation",
        ]
        assert update.docstring == "Update the title of a post."

    def test_private_method_is_mangled(self, introspector):
        """Test that private methods keep their mangled name."""
        methods = {m.name: m for m in introspector.reflect(PostController).methods}

        assert methods["_PostController__audit"].visibility is Visibility.PRIVATE
        assert methods["_render"].visibility is Visibility.PROTECTED


class TestClassRelations:
    """Test ancestry queries."""

    def test_subclass_and_interface(self, introspector):
        """Test is_subclass_of excludes the class itself."""
        post = introspector.reflect(Post)

        assert post.is_subclass_of(AbstractEntity)
        assert post.is_subclass_of(DomainObject)
        assert not post.is_subclass_of(Post)
        assert introspector.reflect(PostController).implements(ControllerInterface)
        assert AbstractEntity in post.ancestors


class TestDecoratorMarkers:
    """Test markers used as decorators."""

    def test_decorator_preserves_written_order(self):
        """Test that stacked decorators are stored top to bottom."""
        first, second = Validate("NotEmpty"), Validate("Integer")

        @first
        @second
        def action(value):
            pass

        assert getattr(action, MARKERS_ATTRIBUTE) == (first, second)

    def test_decorator_on_staticmethod(self):
        """Test that markers reach the function behind a staticmethod."""
        marker = Validate("NotEmpty")
        method = marker(staticmethod(lambda value: value))

        assert getattr(method.__func__, MARKERS_ATTRIBUTE) == (marker,)
