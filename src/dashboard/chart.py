"""Weekly bar chart series and PNG rendering."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Union
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from ..aggregator.summary_aggregator import FinancialSummary

logger = logging.getLogger(__name__)

SERIES = (
    ('income', 'Income', '#4CAF50'),
    ('expenses', 'Expenses', '#F44336'),
    ('balance', 'Balance', '#2196F3'),
)


def build_chart_series(summary: FinancialSummary, currency_label: str = 'R$') -> Dict[str, Any]:
    """
    Pre-aggregated series for a grouped weekly bar chart.

    Returns:
        Dict with ``labels`` (one per weekly entry) and ``datasets``
        (income, expenses and balance, each with label, colour and data).
    """
    datasets: List[Dict[str, Any]] = []
    for attr, label, color in SERIES:
        datasets.append({
            'label': f"{label} ({currency_label})",
            'data': [getattr(w, attr) for w in summary.weekly],
            'backgroundColor': color,
        })
    return {
        'labels': [f"Week {w.week}" for w in summary.weekly],
        'datasets': datasets,
    }


def render_bar_chart(
    summary: FinancialSummary,
    output_path: Union[str, Path],
    currency_label: str = 'R$',
    title: str = 'Weekly Financial Performance'
) -> Path:
    """Write the weekly grouped bar chart as a PNG file."""
    series = build_chart_series(summary, currency_label)
    labels = series['labels']
    width = 0.8 / len(series['datasets'])

    fig, ax = plt.subplots(figsize=(10, 5))
    try:
        for i, dataset in enumerate(series['datasets']):
            positions = [x + (i - 1) * width for x in range(len(labels))]
            ax.bar(positions, dataset['data'], width=width,
                   label=dataset['label'], color=dataset['backgroundColor'])

        ax.set_xticks(range(len(labels)))
        ax.set_xticklabels(labels, rotation=45)
        ax.set_ylabel(f"Amount ({currency_label})")
        ax.set_title(title, fontsize=14, fontweight='bold')
        ax.axhline(y=0, color='gray', linewidth=0.8)
        ax.legend(loc='upper right')
        ax.grid(True, axis='y', alpha=0.3)
        fig.tight_layout()

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path)
    finally:
        plt.close(fig)

    logger.info(f"Saved weekly chart to {output_path}")
    return output_path
