#=============================================================================
# File        : tests/test_identity.py
# Project     : activehandles v1.0
# Component   : Function Identity Resolver Test Suite
# Description : Naming, source and location of callbacks
#               • Declared and inferred names, unknown-name sentinel
#               • One-based line normalization
#               • Renderer fallback
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Created     : 2025-09-02
#=============================================================================

import functools
import sys
from pathlib import Path

import pytest

# Add activehandles to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent))

from activehandles import identity
from activehandles.identity import RawLocation, function_info, reflect_target
from activehandles.report import UNKNOWN_FUNCTION_NAME


def named_callback():
    return 42


anonymous_callback = lambda: 42  # noqa: E731

unbound_callbacks = [lambda: 1]

keyword_callbacks = dict(on_done=lambda: 0)


class Worker:
    def tick(self):
        return "tick"

    def __call__(self):
        return "called"


def _decorated(fn):
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        return fn(*args, **kwargs)
    return wrapper


@_decorated
def decorated_callback():
    return "decorated"


def _raising_renderer(text):
    raise RuntimeError("renderer exploded")


class TestNaming:
    def test_named_function_uses_declared_name(self):
        info = function_info(named_callback)
        assert info.name == "named_callback"
        assert info.anonymous is False
        assert info.fn is named_callback

    def test_lambda_takes_assigned_variable_name(self):
        info = function_info(anonymous_callback)
        assert info.name == "anonymous_callback"
        assert info.anonymous is True
        assert info.location.inferred_name == "anonymous_callback"

    def test_lambda_keyword_argument_name_is_inferred(self):
        info = function_info(keyword_callbacks["on_done"])
        assert info.name == "on_done"

    def test_lambda_without_binding_gets_sentinel(self):
        info = function_info(unbound_callbacks[0])
        assert info.name == UNKNOWN_FUNCTION_NAME
        assert info.anonymous is True

    def test_anonymous_name_is_never_empty(self):
        for fn in (anonymous_callback, unbound_callbacks[0], keyword_callbacks["on_done"]):
            assert function_info(fn).name

    def test_bound_method_uses_qualified_name(self):
        worker = Worker()
        info = function_info(worker.tick)
        assert info.name == "Worker.tick"

    def test_callable_instance_is_named_after_its_class(self):
        info = function_info(Worker())
        assert info.name == "Worker"

    def test_partial_is_named_after_wrapped_function(self):
        fn = functools.partial(named_callback)
        info = function_info(fn)
        assert info.name == "named_callback"
        assert info.fn is fn

    def test_decorated_function_is_unwrapped(self):
        assert reflect_target(decorated_callback).__name__ == "decorated_callback"
        info = function_info(decorated_callback)
        assert "return \"decorated\"" in info.source


class TestLocation:
    def test_named_function_location_is_one_based(self):
        info = function_info(named_callback)
        assert info.location is not None
        assert info.location.file.endswith("test_identity.py")
        assert info.location.line == named_callback.__code__.co_firstlineno
        assert info.location.column == 0

    def test_lambda_location_points_at_lambda(self):
        info = function_info(anonymous_callback)
        assert info.location.line == anonymous_callback.__code__.co_firstlineno
        assert info.location.column == len("anonymous_callback = ")

    def test_zero_based_line_is_normalized(self, monkeypatch):
        monkeypatch.setattr(identity, "locate_function",
                            lambda target: RawLocation("virtual.py", 0, 4))
        info = function_info(named_callback)
        assert info.location.file == "virtual.py"
        assert info.location.line == 1
        assert info.location.column == 4

    def test_builtin_has_no_location(self):
        info = function_info(print)
        assert info.location is None
        assert info.name == "print"
        assert info.source == repr(print)
        assert info.rendered_source


class TestSource:
    def test_named_source_is_function_text(self):
        info = function_info(named_callback)
        assert info.source.startswith("def named_callback():")
        assert "return 42" in info.source

    def test_method_source_is_dedented(self):
        info = function_info(Worker().tick)
        assert info.source.startswith("def tick(self):")

    def test_lambda_source_is_the_expression(self):
        info = function_info(anonymous_callback)
        assert info.source == "lambda: 42"

    def test_anonymous_source_is_rendered_as_assignment(self):
        seen = []

        def renderer(text):
            seen.append(text)
            return text.upper()

        info = function_info(anonymous_callback, renderer=renderer)
        assert seen == ["anonymous_callback = lambda: 42"]
        assert info.rendered_source == "ANONYMOUS_CALLBACK = LAMBDA: 42"

    def test_named_source_is_rendered_directly(self):
        seen = []
        function_info(named_callback, renderer=lambda text: seen.append(text) or text)
        assert seen and seen[0].startswith("def named_callback")

    @pytest.mark.parametrize("fn", [named_callback, anonymous_callback, print])
    def test_renderer_failure_falls_back_to_source(self, fn):
        info = function_info(fn, renderer=_raising_renderer)
        assert info.rendered_source == info.source
        assert info.rendered_source

    def test_empty_render_falls_back_to_source(self):
        info = function_info(named_callback, renderer=lambda text: "")
        assert info.rendered_source == info.source

    def test_default_renderer_highlights(self):
        info = function_info(named_callback)
        assert info.rendered_source != ""
        assert "named_callback" in info.rendered_source

    def test_handle_is_attached(self):
        record = object()
        info = function_info(named_callback, record)
        assert info.handle is record
