# registry_scout/report/json_report.py

"""
Генерация JSON-отчёта для проекта RegistryScout.

Сериализация итога обхода (RunSummary) в файл.
"""
from pathlib import Path

from registry_scout.summary import RunSummary


def render_json(summary: RunSummary, output_path: Path | str) -> Path:
    """
    Сохраняет итог обхода summary в формате JSON по указанному пути.

    :param summary: объект RunSummary
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла

    Пример:
    ```python
    from registry_scout.report.json_report import render_json
    report_path = render_json(summary, 'reports/summary.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(summary.json(pretty=True), encoding="utf-8")
    return output
