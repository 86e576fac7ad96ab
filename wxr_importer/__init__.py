"""
Top-level package for the WordPress (WXR) import utility.

This package bundles all components required to read a WordPress export
file, map its authors and categories onto the blog's content collections,
rehome every externally hosted image, convert post bodies to Markdown and
write the resulting records.  Modules are split into subpackages:

* :mod:`wxr_importer.extractors` – WXR decoding and field normalization
* :mod:`wxr_importer.parsers` – image URL rewriting and HTML to Markdown
* :mod:`wxr_importer.migrators` – image relocation and content/image stores
* :mod:`wxr_importer.utils` – slugs, reference mapping, errors and event logs
* :mod:`wxr_importer.models` – pydantic records and the import report

Each layer has no direct knowledge of configuration or execution strategy;
orchestration is handled in :mod:`wxr_importer.import_tool`.
"""

__version__ = "0.3.0"
