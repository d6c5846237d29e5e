"""Allow ``python -m src.cli`` execution (runs the chart browser)."""

from src.cli.charts import main

main()
