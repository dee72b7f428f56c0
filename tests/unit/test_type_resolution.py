"""Unit tests for the ordered type resolver chains."""

import inspect

import pytest

from blog.domain.model import Comment, Post
from classschema.core.docstring import DocstringParser
from classschema.core.introspection import (
    ReflectedMethod,
    ReflectedParameter,
    ReflectedProperty,
    Visibility,
)
from classschema.core.type_handling import EMPTY, TypeInfo
from classschema.core.type_resolution import (
    ParameterAnnotationResolver,
    ParameterClassHintResolver,
    ParameterContext,
    ParameterDocstringResolver,
    PropertyAnnotationResolver,
    PropertyWrittenNameResolver,
    ResolverChain,
    parameter_type_resolver,
    property_type_resolver,
)
from classschema.domain import ObjectStorage

NAMESPACE = {"Post": Post, "Comment": Comment}


def make_property(annotation):
    return ReflectedProperty(
        name="subject",
        declaring_class="tests.Subject",
        visibility=Visibility.PUBLIC,
        is_static=False,
        annotation=annotation,
        namespace=NAMESPACE,
    )


def make_context(annotation=EMPTY, docstring=None, name="post", position=0):
    parameter = ReflectedParameter(
        name=name,
        position=position,
        kind=inspect.Parameter.POSITIONAL_OR_KEYWORD,
        annotation=annotation,
        namespace=NAMESPACE,
    )
    method = ReflectedMethod(
        name="update_action",
        declaring_class="tests.Subject",
        visibility=Visibility.PUBLIC,
        is_static=False,
        is_abstract=False,
        is_constructor=False,
        parameters=(parameter,),
        docstring=docstring,
    )
    return ParameterContext(parameter=parameter, method=method)


class CountingResolver:
    """Resolver returning a fixed result and counting calls."""

    def __init__(self, result):
        self.result = result
        self.calls = 0

    def resolve(self, subject):
        self.calls += 1
        return self.result


class TestResolverChain:
    """Test first-non-empty semantics."""

    def test_first_non_empty_wins(self):
        """Test later resolvers are not asked once one answers."""
        first, second, third = (
            CountingResolver(None),
            CountingResolver("found"),
            CountingResolver("late"),
        )
        chain = ResolverChain([first, second, third])

        assert chain.resolve("subject") == "found"
        assert (first.calls, second.calls, third.calls) == (1, 1, 0)

    def test_empty_results_fall_through(self):
        """Test empty lists count as no answer."""
        chain = ResolverChain([CountingResolver([]), CountingResolver(None)])

        assert chain.resolve("subject") is None


class TestPropertyResolvers:
    """Test property type sources."""

    def test_annotation_resolver(self):
        """Test evaluated annotations are inferred."""
        result = PropertyAnnotationResolver().resolve(
            make_property(ObjectStorage[Comment])
        )

        assert [info.cls for info in result] == [ObjectStorage, Comment]

    def test_annotation_resolver_skips_strings(self):
        """Test unevaluated annotations are left to the next resolver."""
        assert PropertyAnnotationResolver().resolve(make_property("Unknown")) is None

    def test_written_name_resolver(self):
        """Test unevaluated annotations keep their name."""
        result = PropertyWrittenNameResolver().resolve(make_property("Unknown"))

        assert result == [TypeInfo("Unknown")]

    def test_chain_without_annotation(self):
        """Test that an unannotated property has no type."""
        assert property_type_resolver().resolve(make_property(EMPTY)) is None


class TestParameterResolvers:
    """Test parameter type sources and their priority."""

    def test_annotation_first(self):
        """Test the native annotation wins over the docstring."""
        context = make_context(Post, docstring=":param Comment post: Doc")

        assert parameter_type_resolver().resolve(context) == TypeInfo(
            "blog.domain.model.Post", Post
        )

    def test_class_hint_resolves_written_name(self):
        """Test an unevaluated annotation naming a known class."""
        result = ParameterClassHintResolver().resolve(make_context("Comment"))

        assert result == TypeInfo("blog.domain.model.Comment", Comment)

    def test_class_hint_keeps_unknown_name(self):
        """Test an unknown written name is kept as plain type name."""
        result = ParameterClassHintResolver().resolve(make_context("'Unknown'"))

        assert result == TypeInfo("Unknown")

    def test_annotation_resolver_ignores_missing_annotation(self):
        """Test the annotation resolver has nothing to say without one."""
        assert ParameterAnnotationResolver().resolve(make_context()) is None

    def test_docstring_fallback(self):
        """Test the docstring is consulted when nothing is annotated."""
        context = make_context(docstring=":param Post post: The post")

        assert parameter_type_resolver().resolve(context) == TypeInfo(
            "blog.domain.model.Post", Post
        )

    def test_docstring_builtin_type(self):
        """Test builtin documented types resolve but are not classes."""
        context = make_context(docstring=":param int post: Uid", name="post")
        result = ParameterDocstringResolver().resolve(context)

        assert result.name == "int"
        assert not result.is_class

    def test_docstring_unknown_type_keeps_name(self):
        """Test an unresolvable documented type is kept as a name."""
        context = make_context(docstring=":param Mystery post: ?")

        assert ParameterDocstringResolver().resolve(context) == TypeInfo("Mystery")

    def test_docstring_not_parsed_when_annotated(self):
        """Test the docstring parser stays off the path for typed parameters."""

        class RecordingParser(DocstringParser):
            def __init__(self):
                self.calls = 0

            def parse(self, docstring):
                self.calls += 1
                return super().parse(docstring)

        parser = RecordingParser()
        chain = parameter_type_resolver(parser)

        chain.resolve(make_context(Post, docstring=":param int post: Uid"))
        assert parser.calls == 0

        chain.resolve(make_context(docstring=":param int post: Uid"))
        assert parser.calls == 1

    @pytest.mark.parametrize("docstring", [None, "", "Summary only."])
    def test_nothing_to_resolve(self, docstring):
        """Test untyped and undocumented parameters have no type."""
        context = make_context(docstring=docstring)

        assert parameter_type_resolver().resolve(context) is None
