from ucloudctl.display.output import OutputContext
from ucloudctl.display.table import GAP, record_fields, render_table

__all__ = ["GAP", "OutputContext", "record_fields", "render_table"]
