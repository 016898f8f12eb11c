# lanecal/render/html_shell.py
from __future__ import annotations

HTML_SHELL = r"""<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width, initial-scale=1" />
<title>__TITLE__</title>
<style>
table.month { border-collapse: collapse; width: 100%; table-layout: fixed; }
table.month th, table.month td { border: 1px solid #ddd; vertical-align: top; padding: 0; }
td.other-month { background: #f3f4f6; }
td.today { background: #dbeafe; }
.daynum { display: block; padding: 2px 4px; font-size: 12px; }
.lane { height: 20px; margin: 1px 0; font-size: 12px; overflow: hidden; white-space: nowrap; }
.lane.empty { visibility: hidden; }
.lane.task { background: #3b82f6; color: #fff; padding: 0 4px; }
.lane.task.cat-to-do { background: #3b82f6; }
.lane.task.cat-in-progress { background: #f59e0b; }
.lane.task.cat-review { background: #8b5cf6; }
.lane.task.cat-completed { background: #10b981; }
.lane.task.start { margin-left: 3px; border-top-left-radius: 4px; border-bottom-left-radius: 4px; }
.lane.task.end { margin-right: 3px; border-top-right-radius: 4px; border-bottom-right-radius: 4px; }
</style>
</head>
<body>
__BODY_MARKUP__
<script id="lanecal-data" type="application/json">
__DATA_JSON__
</script>
</body>
</html>
"""
