from .json_loader import dump_result_file, load_manual_findings

__all__ = ["dump_result_file", "load_manual_findings"]
