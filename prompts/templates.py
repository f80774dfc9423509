"""Text templates for sales insight generation."""

from __future__ import annotations

from string import Template

# --- Offline summary used when no Gemini key is configured ---

MOCK_ANALYSIS = Template(
    'Resumen (MOCK) para "$name" ($category):\n'
    "- $description\n"
    "- Ventas del día: $sales_summary\n"
    "Sugerencia: Optimiza títulos e imágenes para mejorar conversión."
)

MOCK_DEFAULTS: dict[str, str] = {
    "name": "Producto",
    "category": "N/D",
    "description": "Descripción no provista",
    "sales_summary": "N/D",
}

# --- Prompt sent to Gemini when the caller gives none ---

SALES_ANALYSIS_PROMPT = Template(
    "Analiza estas ventas y redacta insights:\n"
    "$sales_summary\n"
    "Producto: $name | Categoría: $category | Desc: $description"
)
