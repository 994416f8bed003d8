from finpilot.core.modules.advice.models import FinancialContext

CHAT_GUIDELINES = (
    "당신은 대한민국 사용자를 돕는 재무 가이드입니다.",
    "- 반드시 한국어로 답변하세요.",
    "- 금액은 KRW(₩)로, 예: ₩1,001,000.",
    "- 표는 사용자가 원할 때만 간결하게 제시하세요.",
)


def format_krw(amount: float) -> str:
    """Whole-won amount with thousands separators, e.g. ₩1,001,000."""
    return f"₩{amount:,.0f}"


def format_number(value: float) -> str:
    """Plain number without a trailing .0 for whole values."""
    return str(int(value)) if float(value).is_integer() else str(value)


def build_budget_advice_prompt(monthly_income: float, fixed_costs: float, savings_goal: float) -> str:
    return (
        "Give concise budgeting advice for a user. "
        f"Income: {format_number(monthly_income)}, fixed costs: {format_number(fixed_costs)}, "
        f"target monthly savings: {format_number(savings_goal)}. "
        "Return 3 bullet points."
    )


def build_chat_system_prompt(context: FinancialContext | None) -> str:
    """Korean financial-guide instructions, followed by the user's figures when provided."""
    prompt = "\n".join(CHAT_GUIDELINES)

    figures = []
    if context is not None:
        if context.monthly_income is not None:
            figures.append(f"월 소득: {format_krw(context.monthly_income)}")
        if context.fixed_costs is not None:
            figures.append(f"고정비: {format_krw(context.fixed_costs)}")
        if context.savings_goal is not None:
            figures.append(f"저축 목표: {format_krw(context.savings_goal)}")

    if figures:
        prompt += "\n\n[참고]\n" + "\n".join(figures)
    return prompt
