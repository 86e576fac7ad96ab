import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from wxr_importer.utils.slugs import clean_slug, slugify, unique_slug


def test_accents_are_removed_and_separators_collapsed():
    assert slugify("Gestão & Organização") == "gestao-organizacao"


def test_leading_and_trailing_separators_are_trimmed():
    assert slugify("  --Hello, World!--  ") == "hello-world"


def test_slug_without_alphanumerics_is_empty():
    assert slugify("!!! ???") == ""
    assert slugify("") == ""


def test_free_candidate_is_returned_as_is():
    assert unique_slug("hello-world", {"other"}) == "hello-world"


def test_numeric_suffix_skips_taken_values():
    taken = {"hello-world", "hello-world-1", "hello-world-2"}
    assert unique_slug("hello-world", taken) == "hello-world-3"


def test_clean_slug_keeps_slug_shaped_values():
    assert clean_slug("hello-world-2") == "hello-world-2"


def test_clean_slug_rebuilds_paths_and_stray_characters():
    assert clean_slug("../../escaped") == "escaped"
    assert clean_slug("a/b\\c") == "a-b-c"
    assert clean_slug("Olá Mundo") == "ola-mundo"
    assert clean_slug("..") == ""
