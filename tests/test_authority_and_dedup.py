import unittest

from research_harvester.core.authority import classify_authority, classify_source
from research_harvester.core.dedup import canonicalize_content, content_hash, deduplicate
from research_harvester.models import Finding


def _finding(content: str, url: str, domain: str = "STACK") -> Finding:
    return Finding(content=content, source_url=url, domain_category=domain)


class SourceAuthorityTests(unittest.TestCase):
    def test_official_documentation_is_high(self):
        for url in (
            "https://docs.example.dev/guide",
            "https://docs.python.org/3/",
            "https://react.dev",
            "https://svelte.dev/docs/introduction",
            "https://github.com/acme/widget/docs/README.md",
            "https://example.org/docs/start",
            "https://example.com/official/handbook",
        ):
            with self.subTest(url=url):
                self.assertEqual(classify_source(url), "HIGH")

    def test_reference_sites_are_medium(self):
        for url in (
            "https://developer.mozilla.org/en-US/docs/Web/JavaScript",
            "https://stackoverflow.com/questions/1/how",
            "https://cs.stanford.edu/notes",
            "https://www.usa.gov/developer",
        ):
            with self.subTest(url=url):
                self.assertEqual(classify_source(url), "MEDIUM")

    def test_blog_platforms_are_low(self):
        for url in (
            "https://medium.com/@someone/post",
            "https://dev.to/someone/post",
            "https://someone.hashnode.dev/post",
            "https://blog.example.com/react-guide",
        ):
            with self.subTest(url=url):
                self.assertEqual(classify_source(url), "LOW")

    def test_unmatched_is_unverified_and_random_blog_is_not_high(self):
        self.assertEqual(classify_source("https://random.example.com/page"), "UNVERIFIED")
        self.assertIn(classify_source("https://some-random-blog.example.com/post"), {"LOW", "UNVERIFIED"})
        self.assertEqual(classify_authority(""), "UNVERIFIED")

    def test_verified_flag_upgrades_to_high(self):
        self.assertEqual(classify_source("https://random.example.com/page", verified=True), "HIGH")
        self.assertEqual(classify_source("https://medium.com/post", verified=True), "HIGH")

    def test_matching_is_case_insensitive(self):
        self.assertEqual(classify_source("HTTPS://DOCS.Example.COM/Guide"), "HIGH")

    def test_finding_confidence_is_derived_from_url(self):
        self.assertEqual(_finding("x", "https://docs.example.com/").confidence_level, "HIGH")
        self.assertEqual(
            Finding(content="x", source_url="https://example.com/", domain_category="STACK", verified=True).confidence_level,
            "HIGH",
        )


class DeduplicationTests(unittest.TestCase):
    def test_canonicalization(self):
        self.assertEqual(canonicalize_content("  Hello \n\t WORLD  "), "hello world")
        self.assertEqual(content_hash("Hello  World"), content_hash("hello\nworld"))

    def test_duplicates_fold_into_first_occurrence(self):
        findings = [
            _finding("Hello World", "https://docs.a.dev/v1"),
            _finding("Other text", "https://docs.b.dev/"),
            _finding("hello   world", "https://docs.a.dev/v2"),
            _finding("HELLO WORLD", "https://docs.a.dev/en"),
        ]

        result = deduplicate(findings)

        self.assertEqual([f.source_url for f in result], ["https://docs.a.dev/v1", "https://docs.b.dev/"])
        self.assertEqual(result[0].alternate_sources, ["https://docs.a.dev/v2", "https://docs.a.dev/en"])
        self.assertEqual(result[1].alternate_sources, [])

    def test_no_two_results_share_a_content_hash(self):
        findings = [_finding(text, f"https://docs.x.dev/{i}") for i, text in enumerate(["A b", "a  B", "c", "C ", "d"])]
        result = deduplicate(findings)
        hashes = [content_hash(f.content) for f in result]
        self.assertEqual(len(hashes), len(set(hashes)))
        self.assertEqual(len(result), 3)

    def test_empty_content_is_dropped_not_collided(self):
        findings = [
            _finding("", "https://docs.a.dev/empty"),
            _finding("   \n", "https://docs.b.dev/blank"),
            _finding("real", "https://docs.c.dev/"),
        ]
        result = deduplicate(findings)
        self.assertEqual([f.source_url for f in result], ["https://docs.c.dev/"])
        self.assertEqual(result[0].alternate_sources, [])

    def test_idempotent(self):
        findings = [
            _finding("Alpha", "https://docs.a.dev/"),
            _finding("alpha", "https://docs.b.dev/"),
            _finding("Beta", "https://docs.c.dev/"),
            _finding("", "https://docs.d.dev/"),
        ]
        once = deduplicate(findings)
        twice = deduplicate(once)
        self.assertEqual(once, twice)

    def test_alternates_carried_from_folded_duplicate(self):
        dup = _finding("same", "https://docs.b.dev/")
        dup.alternate_sources.append("https://docs.c.dev/")
        result = deduplicate([_finding("Same", "https://docs.a.dev/"), dup])
        self.assertEqual(result[0].alternate_sources, ["https://docs.b.dev/", "https://docs.c.dev/"])


if __name__ == "__main__":
    unittest.main()
