"""registry_scout.crawler: обход индекса реестра, ограничение запросов и модели данных."""
