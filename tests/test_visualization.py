from datetime import date

from finance_insights.aggregation import transactions_to_frame
from finance_insights.analytics import FinanceInsightsAnalyzer
from finance_insights.models import Budget, SpendingPrediction, Transaction
from finance_insights.visualization import (
    DEFAULT_CATEGORY_COLOR,
    category_color,
    create_budget_comparison_chart,
    create_category_pie_chart,
    create_health_gauge,
    create_monthly_expense_chart,
    create_prediction_chart,
)


def _rows():
    return [
        Transaction('1', 50, '2024-01-05', 'Lunch', 'expense', 'Food & Dining'),
        Transaction('2', 30, '2024-02-05', 'Taxi', 'expense', 'Transportation'),
        Transaction('3', 20, '2024-02-06', 'Dinner', 'expense', 'Food & Dining'),
        Transaction('4', 900, '2024-02-01', 'Paycheck', 'income', 'Salary'),
    ]


def test_empty_inputs_give_placeholder_figures():
    empty = transactions_to_frame([])
    for fig in (
        create_monthly_expense_chart(empty),
        create_category_pie_chart(empty),
        create_prediction_chart([]),
        create_budget_comparison_chart(empty, [], date(2024, 2, 1)),
        create_health_gauge(FinanceInsightsAnalyzer([]).calculate_health_metrics()),
    ):
        assert fig.layout.title.text == 'No data to display'
        assert len(fig.data) == 0


def test_category_color_falls_back():
    assert category_color('Food & Dining') == '#FF6B6B'
    assert category_color('Unknown') == DEFAULT_CATEGORY_COLOR


def test_monthly_expense_chart():
    fig = create_monthly_expense_chart(transactions_to_frame(_rows()))
    assert list(fig.data[0].x) == ['Jan 2024', 'Feb 2024']
    assert list(fig.data[0].y) == [50.0, 50.0]


def test_category_pie_chart():
    fig = create_category_pie_chart(transactions_to_frame(_rows()))
    assert len(fig.data) == 1
    assert set(fig.data[0].labels) == {'Food & Dining', 'Transportation'}


def test_budget_comparison_chart():
    frame = transactions_to_frame(_rows())
    fig = create_budget_comparison_chart(frame, [Budget('Food & Dining', 100, '2024-02')], date(2024, 2, 20))
    assert [trace.name for trace in fig.data] == ['Budget', 'Actual']
    assert list(fig.data[1].y) == [20.0]
    assert fig.layout.barmode == 'group'


def test_prediction_chart_and_gauge():
    predictions = [SpendingPrediction('Food', 120.0, 0.8, 'increasing', 'Watch it')]
    fig = create_prediction_chart(predictions)
    assert fig.layout.title.text == 'Next month spending forecast'

    health = FinanceInsightsAnalyzer(_rows(), as_of=date(2024, 2, 20)).calculate_health_metrics()
    gauge = create_health_gauge(health)
    assert gauge.data[0].value == round(health['overall'], 1)
