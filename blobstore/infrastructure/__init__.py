"""Infrastructure layer: Azure Blob backends and storage exceptions."""
