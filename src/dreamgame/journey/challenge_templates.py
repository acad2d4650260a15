"""Rule-based daily challenge templates.

The daily pool for a user is the general templates plus the templates for
their industry and business stage. Quiz templates carry their options and
the correct answer.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ChallengeTemplate:
    type: str  # task | quiz
    category: str
    description: str
    xp_reward: int
    coin_reward: int
    options: tuple[str, ...] | None = None
    correct_answer: str | None = None


def _task(category: str, description: str, xp: int, coins: int) -> ChallengeTemplate:
    return ChallengeTemplate("task", category, description, xp, coins)


def _quiz(
    category: str,
    description: str,
    options: tuple[str, ...],
    correct_answer: str,
    xp: int,
    coins: int,
) -> ChallengeTemplate:
    return ChallengeTemplate("quiz", category, description, xp, coins, options, correct_answer)


GENERAL_TEMPLATES: list[ChallengeTemplate] = [
    _task("daily_progress", "Update your business progress tracker with today's key metrics", 50, 100),
    _task("networking", "Connect with another entrepreneur in your industry on LinkedIn", 75, 150),
    _task("learning", "Read an industry report or case study relevant to your business", 60, 120),
    _task("productivity", "Create a prioritized task list for your next business milestone", 45, 90),
    _quiz(
        "market_research",
        "What's the first step in validating a business idea?",
        ("Build a complete product", "Talk to potential customers", "Create a business plan", "Design a logo"),
        "Talk to potential customers",
        100,
        200,
    ),
    _quiz(
        "business_strategy",
        "Which of these is NOT a valid way to validate market demand?",
        (
            "Creating a landing page to gauge interest",
            "Conducting customer interviews",
            "Building a full product without feedback",
            "Running small-scale tests",
        ),
        "Building a full product without feedback",
        90,
        180,
    ),
    _quiz(
        "finance",
        "What's the most important financial metric for an early-stage startup?",
        ("Revenue Growth", "Burn Rate", "Profit Margin", "Total Assets"),
        "Burn Rate",
        95,
        190,
    ),
    _task("productivity", "Implement a time-tracking system for your daily business activities", 70, 140),
    _task("customer_research", "Conduct at least 3 customer interviews to gather product feedback", 120, 240),
]

INDUSTRY_TEMPLATES: dict[str, list[ChallengeTemplate]] = {
    "technology": [
        _task("product_development", "Create a technical specification document for your main feature", 120, 240),
        _quiz(
            "tech_trends",
            "Which development methodology is best for rapid iteration?",
            ("Waterfall", "Agile", "V-Model", "Big Bang"),
            "Agile",
            100,
            200,
        ),
        _task("security", "Perform a basic security audit of your application", 150, 300),
        _quiz(
            "tech_stack",
            "What's most important when choosing a tech stack for a startup?",
            (
                "Using the newest technologies",
                "Speed of development and maintenance",
                "What competitors use",
                "Personal preference",
            ),
            "Speed of development and maintenance",
            110,
            220,
        ),
        _task(
            "tech_growth",
            "Analyze your application's performance metrics and identify optimization opportunities",
            130,
            260,
        ),
        _task("tech_security", "Review and update your application's security measures", 140, 280),
    ],
    "ecommerce": [
        _task("inventory", "Analyze your top-selling products and optimize inventory levels", 90, 180),
        _quiz(
            "retail_operations",
            "What's the most important metric for an e-commerce business?",
            ("Total Revenue", "Customer Lifetime Value", "Number of Products", "Website Traffic"),
            "Customer Lifetime Value",
            110,
            220,
        ),
        _task("customer_service", "Review and respond to all customer feedback from the past week", 100, 200),
        _task("marketing", "Optimize product descriptions for SEO on your top 5 products", 130, 260),
        _task("ecommerce_optimization", "Optimize your product pages for conversion rate", 120, 240),
        _task("inventory_management", "Review and optimize your inventory management system", 110, 220),
    ],
    "services": [
        _task(
            "service_delivery",
            "Document your service delivery process and identify improvement areas",
            110,
            220,
        ),
        _quiz(
            "service_business",
            "What's the most effective way to price services?",
            ("Hourly Rate", "Value-Based Pricing", "Cost-Plus Pricing", "Market Rate"),
            "Value-Based Pricing",
            100,
            200,
        ),
        _task("client_management", "Create a client onboarding checklist for your services", 120, 240),
    ],
    "health": [
        _task("compliance", "Review and update your health & safety compliance documentation", 140, 280),
        _quiz(
            "healthcare",
            "What's the most important factor in healthcare business success?",
            ("Location", "Patient Satisfaction", "Equipment Quality", "Marketing"),
            "Patient Satisfaction",
            120,
            240,
        ),
        _task("patient_care", "Develop a patient feedback collection system", 130, 260),
    ],
    "education": [
        _task("curriculum", "Create an outline for a new course or training program", 120, 240),
        _quiz(
            "edtech",
            "What's the most effective way to measure learning outcomes?",
            ("Test Scores", "Student Engagement", "Completion Rates", "Student Feedback"),
            "Student Engagement",
            110,
            220,
        ),
        _task("student_success", "Analyze student progress data and identify improvement areas", 130, 260),
    ],
    "food": [
        _task("food_safety", "Conduct a comprehensive food safety audit of your operations", 150, 300),
        _quiz(
            "food_business",
            "What's the most important factor in food business profitability?",
            ("Menu Pricing", "Food Cost Control", "Marketing", "Location"),
            "Food Cost Control",
            120,
            240,
        ),
        _task("menu_engineering", "Analyze your menu items' profitability and popularity", 140, 280),
    ],
}

STAGE_TEMPLATES: dict[str, list[ChallengeTemplate]] = {
    "idea": [
        _task("validation", "Create a simple landing page to test your business concept", 100, 200),
        _quiz(
            "ideation",
            "What's the most important factor in idea validation?",
            ("Market Size", "Customer Need", "Competition", "Technology"),
            "Customer Need",
            90,
            180,
        ),
    ],
    "planning": [
        _task("business_planning", "Draft your business model canvas", 130, 260),
        _quiz(
            "planning",
            "What should be the first section of your business plan?",
            ("Financials", "Executive Summary", "Market Analysis", "Team"),
            "Executive Summary",
            100,
            200,
        ),
    ],
    "startup": [
        _task("growth", "Set up your customer acquisition tracking system", 120, 240),
        _quiz(
            "startup_metrics",
            "What's the most important early-stage startup metric?",
            ("Revenue", "User Growth", "Profit", "Market Share"),
            "User Growth",
            110,
            220,
        ),
    ],
    "established": [
        _task("scaling", "Create a 90-day scaling plan for your business", 150, 300),
        _quiz(
            "business_growth",
            "What's the most effective way to scale an established business?",
            ("Hiring More Staff", "Process Automation", "Marketing", "New Products"),
            "Process Automation",
            130,
            260,
        ),
    ],
}


def template_pool(industry: str | None, stage: str | None) -> list[ChallengeTemplate]:
    """General templates plus the user's industry and stage templates."""
    return [
        *GENERAL_TEMPLATES,
        *INDUSTRY_TEMPLATES.get(industry or "", []),
        *STAGE_TEMPLATES.get(stage or "", []),
    ]
