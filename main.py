"""
Entry point for the WordPress WXR import tool.
"""

import glob
import json
import os
import sys

from wxr_importer.import_tool import WordPressImportTool

CONFIG_FILE = "config/import_config.json"


def main(argv=None):
    """
    Import every WXR export given on the command line, or every ``.xml``
    file found in the ``docs`` directory when none is given.
    """
    argv = sys.argv[1:] if argv is None else argv
    tool = WordPressImportTool(config_file=CONFIG_FILE)
    tool.log_message("Starting WordPress import.")

    docs_path = "docs/"
    xml_files = list(argv) or sorted(glob.glob(os.path.join(docs_path, "*.xml")))
    tool.log_message(f"Discovered XML files: {xml_files}", level="DEBUG")

    if not xml_files:
        tool.log_message(
            f"No WordPress export files (.xml) found in '{docs_path}' directory.",
            level="ERROR",
        )
        return 1

    failed = 0
    for xml_path in xml_files:
        tool.log_message(f"Importing {xml_path}")
        report = tool.import_file(xml_path)
        if not report.success:
            failed += 1

        payload = report.to_json_dict()
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        name = os.path.splitext(os.path.basename(xml_path))[0]
        report_path = os.path.join(tool.reports_dir, f"{name}.report.json")
        with open(report_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        tool.log_message(f"Report written to {report_path}", level="DEBUG")

    tool.log_message("Import process finished.")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
