"""Simple example of running unittest tests with the presenter."""

import unittest

from presenter import AssertionCountingMixin, PresenterTestRunner, load_settings


# 1. Define the code under test
def add(a, b):
    return a + b


# 2. Write test cases, counting assertions with the mixin
class AddTest(AssertionCountingMixin, unittest.TestCase):
    def test_integers(self):
        self.assertEqual(4, add(2, 2))

    def test_strings(self):
        self.assertEqual("ab", add("a", "b"))

    def test_broken(self):
        self.assertEqual(5, add(2, 2))


if __name__ == "__main__":
    # 3. Load the tests
    suite = unittest.defaultTestLoader.loadTestsFromTestCase(AddTest)

    # 4. Run them with feed output and no timings
    settings = load_settings(format="feed", show_times=False)
    result = PresenterTestRunner(settings=settings).run(suite, name="examples")

    raise SystemExit(0 if result.wasSuccessful() else 1)
