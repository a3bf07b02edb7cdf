import io
import logging
import unittest

from gatedcg.application.errors import AnalysisAbort
from gatedcg.language.origin import SourceLocation, UNKNOWN_LOCATION, originString
from gatedcg.util.application.console import Console
from gatedcg.util.application.errorhandler import ErrorHandler
from gatedcg.util.io.formatting import elapsedTime, pluralize
from gatedcg.util.typedispatch import *


class TestTypeDisbatch(unittest.TestCase):
    def testTD(self):
        def visitNumber(self, node):
            return "number"

        def visitDefault(self, node):
            return "default"

        class FooBar(TypeDispatcher):
            num = dispatch(int)(visitNumber)
            default = defaultdispatch(visitDefault)

        self.assertEqual(FooBar.__dict__["num"], visitNumber)
        self.assertEqual(FooBar.__dict__["default"], visitDefault)

        foo = FooBar()

        self.assertEqual(foo(1), "number")
        self.assertEqual(foo(2**70), "number")
        self.assertEqual(foo(True), "number")
        self.assertEqual(foo(1.0), "default")

    def testInheritance(self):
        class Base(TypeDispatcher):
            @dispatch(str)
            def visitStr(self, node):
                return "base"

            @defaultdispatch
            def visitOther(self, node, extra=None):
                return extra

        class Derived(Base):
            @dispatch(str, bytes)
            def visitText(self, node):
                return "derived"

        self.assertEqual(Base()("x"), "base")
        self.assertEqual(Derived()("x"), "derived")
        self.assertEqual(Derived()(b"x"), "derived")
        self.assertEqual(Derived()(3, "extra"), "extra")

    def testDuplicateHandlers(self):
        with self.assertRaises(TypeDispatchDeclarationError):

            class Broken(TypeDispatcher):
                @dispatch(int)
                def visitA(self, node):
                    pass

                @dispatch(int)
                def visitB(self, node):
                    pass

    def testNoHandler(self):
        class Strict(TypeDispatcher):
            @dispatch(int)
            def visitInt(self, node):
                return node

        with self.assertRaises(TypeDispatchError):
            Strict()("text")


class TestErrorHandler(unittest.TestCase):
    def setUp(self):
        self.handler = ErrorHandler()
        self.site = SourceLocation("src/lib.rs", 4, 8, 4, 20)

    def testDeferedUntilFlush(self):
        with self.assertLogs("gatedcg.util.application.errorhandler", logging.WARNING) as logs:
            self.handler.warn("unresolved-method", "could not resolve 'm'", [self.site])
            self.assertEqual(len(self.handler.buffer), 1)
            self.handler.flush()

        self.assertEqual(self.handler.buffer, [])
        self.assertIn('unresolved-method: could not resolve \'m\' (File "src/lib.rs", line 4:8)', logs.output[0])

    def testFinalize(self):
        self.handler.warn("w", "only a warning")
        self.handler.finalize()

        self.handler.error("internal", "broken")
        with self.assertRaises(AnalysisAbort):
            self.handler.finalize()

    def testScopes(self):
        self.handler.warn("w", "outer")
        with self.handler.scope():
            self.handler.warn("w", "inner")
            self.assertEqual(self.handler.warningCount, 1)
        self.assertEqual(self.handler.warningCount, 2)
        self.assertEqual(len(self.handler.warnings("w")), 2)
        self.assertEqual(self.handler.warnings("other"), [])

    def testStatusManagerSuppressesAbort(self):
        with self.assertLogs("gatedcg.util.application.errorhandler", logging.ERROR):
            with self.handler.statusManager():
                self.handler.error("internal", "broken")
                self.handler.finalize()
        self.assertEqual(self.handler.statusString(), "1 errors, 0 warnings")


class TestConsole(unittest.TestCase):
    def testQuietByDefault(self):
        out = io.StringIO()
        console = Console(out)
        with console.scope("extract"):
            console.output("hidden")
        self.assertEqual(out.getvalue(), "")
        self.assertEqual([path for path, _ in console.timings], [("extract",)])

    def testVerbose(self):
        out = io.StringIO()
        console = Console(out, verbose=True)
        with console.scope("load"):
            with console.scope("decode"):
                console.output("3 items")
        text = out.getvalue()
        self.assertIn("begin [ load | decode ]", text)
        self.assertIn("\t3 items\n", text)
        self.assertEqual(len(console.timings), 2)


class TestFormatting(unittest.TestCase):
    def testOrigin(self):
        self.assertEqual(originString(None), "<unknown origin>")
        self.assertEqual(str(UNKNOWN_LOCATION), "<unknown origin>")
        self.assertEqual(str(SourceLocation("a.rs", 3, -1, 3, -1)), 'File "a.rs", line 3')

    def testHelpers(self):
        self.assertEqual(pluralize(1, "edge"), "1 edge")
        self.assertEqual(pluralize(2, "edge"), "2 edges")
        self.assertTrue(elapsedTime(0.5).endswith("ms"))
