"""Seed records for the service package catalog.

Records omit ``id``; the catalog service derives it from the title.
"""

DEFAULT_PACKAGES = [
    {
        "title": "Business Foundations Assessment",
        "description": (
            "A focused diagnostic of your current operations, positioning and "
            "growth constraints, ending in a prioritized improvement plan."
        ),
        "category": "strategy",
        "tier": "foundation",
        "price_band": "$2.5k - $5k",
        "timeline": "2-3 weeks",
        "includes": [
            "Current-state business assessment",
            "Competitive landscape review",
            "Prioritized improvement plan",
            "90-day action roadmap",
        ],
        "industry_tags": ["universal"],
        "eligibility_criteria": {
            "company_size": ["solo", "startup", "small"],
            "budget_range": ["bootstrap", "under-5k"],
        },
        "content": {
            "what_you_get": "A clear picture of where your business stands and the first moves that matter most.",
            "why_this_fits": "Early-stage businesses get the most leverage from fixing fundamentals before scaling.",
            "timeline": "Two to three weeks from kickoff to final plan.",
            "next_steps": [
                "Book a kickoff call",
                "Share existing financials and marketing materials",
            ],
        },
    },
    {
        "title": "Digital Launch Starter",
        "description": (
            "Launch or refresh your online presence with a conversion-focused "
            "website, local marketing setup and customer acquisition basics."
        ),
        "category": "marketing",
        "tier": "foundation",
        "price_band": "$5k - $10k",
        "timeline": "2-4 weeks",
        "includes": [
            "Conversion-focused website",
            "Local search and listings setup",
            "Customer acquisition playbook",
            "Analytics dashboard",
        ],
        "industry_tags": ["retail", "hospitality", "professional services"],
        "eligibility_criteria": {
            "company_size": ["solo", "startup", "small"],
            "budget_range": ["under-5k", "5k-15k"],
        },
        "content": {
            "what_you_get": "A working acquisition channel and the measurement to improve it.",
            "why_this_fits": "Customer-facing businesses win first on being easy to find and easy to buy from.",
            "timeline": "Live within a month.",
            "next_steps": [
                "Schedule a brand and content workshop",
                "Confirm domain and hosting access",
            ],
        },
    },
    {
        "title": "Growth Acceleration Program",
        "description": (
            "A structured program to increase revenue through improved customer "
            "acquisition, pricing and sales process, with automation of repetitive work."
        ),
        "category": "growth",
        "tier": "growth",
        "price_band": "$15k - $25k",
        "timeline": "1-3 months",
        "includes": [
            "Revenue growth strategy",
            "Sales process redesign",
            "Marketing automation setup",
            "Pricing and packaging review",
            "Monthly performance reviews",
        ],
        "industry_tags": ["technology", "saas", "software", "professional services"],
        "eligibility_criteria": {
            "company_size": ["small", "medium"],
            "budget_range": ["15k-50k"],
        },
        "content": {
            "what_you_get": "A repeatable growth engine with the processes and tooling to run it.",
            "why_this_fits": "Businesses with proven demand grow fastest by systematizing what already works.",
            "timeline": "One to three months with monthly checkpoints.",
            "next_steps": [
                "Book a growth strategy session",
                "Share current pipeline and revenue metrics",
            ],
        },
    },
    {
        "title": "Operations Optimization Sprint",
        "description": (
            "Streamline operations to improve efficiency: process mapping, supply "
            "chain review and automation of manual workflows."
        ),
        "category": "operations",
        "tier": "growth",
        "price_band": "$25k - $50k",
        "timeline": "6-8 weeks",
        "includes": [
            "End-to-end process mapping",
            "Supply chain and inventory review",
            "Workflow automation",
            "Team operating cadence",
        ],
        "industry_tags": ["retail", "ecommerce", "manufacturing"],
        "eligibility_criteria": {
            "company_size": ["medium", "large"],
            "budget_range": ["15k-50k", "50k-100k"],
        },
        "content": {
            "what_you_get": "Leaner operations with measurable cycle-time and cost improvements.",
            "why_this_fits": "Operational drag compounds as volume grows; fixing it unlocks margin.",
            "timeline": "Six to eight weeks.",
            "next_steps": [
                "Arrange an operations walkthrough",
                "Identify process owners for each workflow",
            ],
        },
    },
    {
        "title": "Enterprise Transformation Partnership",
        "description": (
            "A multi-workstream digital transformation engagement covering "
            "strategy, technology modernization, change management and governance."
        ),
        "category": "transformation",
        "tier": "enterprise",
        "price_band": "$50k - $100k",
        "timeline": "3-6 months",
        "includes": [
            "Digital transformation strategy",
            "Technology modernization roadmap",
            "Change management program",
            "Governance and risk framework",
            "Executive steering committee",
            "Dedicated engagement lead",
        ],
        "industry_tags": ["finance", "healthcare", "technology"],
        "eligibility_criteria": {
            "company_size": ["large", "enterprise"],
            "budget_range": ["50k-100k", "100k+"],
        },
        "content": {
            "what_you_get": "A coordinated transformation program with executive-level governance.",
            "why_this_fits": "Complex organizations need aligned workstreams, not isolated projects.",
            "timeline": "Three to six months, delivered in quarterly waves.",
            "next_steps": [
                "Schedule an executive alignment session",
                "Nominate workstream sponsors",
            ],
        },
    },
    {
        "title": "Executive Strategy Retainer",
        "description": (
            "Ongoing senior advisory for leadership teams pursuing market expansion, "
            "scale operations and long-range planning."
        ),
        "category": "strategy",
        "tier": "enterprise",
        "price_band": "Custom ($100k+)",
        "timeline": "6-12 months",
        "includes": [
            "Quarterly strategic planning",
            "Market expansion analysis",
            "Board and investor preparation",
            "On-call executive advisory",
            "Annual operating plan",
        ],
        "industry_tags": ["universal"],
        "eligibility_criteria": {
            "company_size": ["enterprise"],
            "budget_range": ["100k+"],
        },
        "content": {
            "what_you_get": "A senior advisor embedded in your leadership rhythm.",
            "why_this_fits": "Scaling organizations benefit from continuous, outside strategic perspective.",
            "timeline": "Six to twelve months, renewable.",
            "next_steps": [
                "Arrange an introductory call with a senior partner",
                "Share current strategic plan",
            ],
        },
    },
]
