"""Market Data Fetchers.

Each fetcher gathers one field of the Market Snapshot from a public source
(Wikipedia REST summaries, DuckDuckGo instant answers, NewsAPI) and fills the
gaps from static industry tables.

Rules
-----
- Every fetcher takes the shared ``httpx.AsyncClient`` and its own timeout
- A failed request degrades to the static tables; it never raises
- Funding landscape and technical feasibility are pure table lookups
- Similarity is Jaccard word overlap x 100, rounded
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Optional
from urllib.parse import quote

import httpx

from ..schemas.market_schema import (
    Competitor,
    ExistingProduct,
    FundingInfo,
    FundingRound,
    IndustryInsights,
    MarketValidation,
    NewsItem,
    TechnicalFeasibility,
)
from ..score_math import round_half_up
from .signal_extractor import calculate_similarity, extract_keywords

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------
WIKIPEDIA_SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/summary/{title}"
DUCKDUCKGO_URL = "https://api.duckduckgo.com/"
NEWSAPI_URL = "https://newsapi.org/v2/everything"

MAX_COMPETITORS = 6
_COLLECT_LIMIT = 8
MIN_COMPETITORS = 3

# ---------------------------------------------------------------------------
# Static tables
# ---------------------------------------------------------------------------

# Industry → (total market, USD billions; annual growth, percent). 2024 estimates.
INDUSTRY_MARKET_SIZES: dict[str, tuple[float, float]] = {
    "Technology": (5200.0, 13.2),
    "Healthcare": (4800.0, 16.1),
    "Finance": (3100.0, 9.4),
    "E-commerce": (5800.0, 15.8),
    "Education": (2800.0, 19.3),
    "Entertainment": (2400.0, 8.7),
    "Food & Beverage": (1950.0, 6.1),
    "Real Estate": (3400.0, 7.2),
    "Transportation": (1100.0, 10.5),
}

DEFAULT_MARKET_SIZE = 1500.0
DEFAULT_GROWTH = 10.0

# Ordered: first keyword group found in the solution decides the TAM share.
ADDRESSABLE_MULTIPLIERS: list[tuple[tuple[str, ...], float]] = [
    (("enterprise", "b2b"), 0.15),
    (("consumer", "b2c"), 0.12),
    (("saas", "platform"), 0.08),
    (("niche", "specific"), 0.05),
]
DEFAULT_ADDRESSABLE_MULTIPLIER = 0.10

_SIZE_PATTERN = re.compile(r"\$?(\d+(?:\.\d+)?)\s*(billion|million|trillion)", re.IGNORECASE)

INDUSTRY_INSIGHTS: dict[str, dict[str, list[str]]] = {
    "Technology": {
        "trends": [
            "AI integration is becoming standard across all products",
            "Cloud-native architecture is the default for new startups",
            "API-first approach enables faster integrations",
        ],
        "challenges": [
            "High technical talent competition and costs",
            "Rapid technology obsolescence",
            "Data privacy and security regulations",
        ],
        "opportunities": [
            "AI-powered automation solutions",
            "Developer tooling and infrastructure",
            "SaaS for underserved niches",
        ],
    },
    "Healthcare": {
        "trends": [
            "Telemedicine adoption accelerated post-COVID",
            "AI-assisted diagnostics gaining regulatory approval",
            "Patient data interoperability becoming critical",
        ],
        "challenges": [
            "Strict regulatory compliance (HIPAA, FDA)",
            "Long sales cycles with healthcare institutions",
            "High barrier to entry for clinical validation",
        ],
        "opportunities": [
            "Mental health and wellness platforms",
            "Chronic disease management tools",
            "Healthcare data analytics",
        ],
    },
    "Finance": {
        "trends": [
            "Embedded finance and banking-as-a-service growing",
            "Cryptocurrency and blockchain integration",
            "Real-time payment processing becoming standard",
        ],
        "challenges": [
            "Financial regulations and compliance (PCI-DSS, KYC)",
            "Trust and security requirements are high",
            "Competition from established financial institutions",
        ],
        "opportunities": [
            "Fintech for underserved markets",
            "Personal finance management tools",
            "Alternative lending and credit solutions",
        ],
    },
    "E-commerce": {
        "trends": [
            "Social commerce and influencer-driven sales",
            "Sustainability and eco-friendly products",
            "Personalization and AI recommendations",
        ],
        "challenges": [
            "Customer acquisition costs rising",
            "Logistics and fulfillment complexity",
            "Intense competition from Amazon and large players",
        ],
        "opportunities": [
            "Niche marketplaces",
            "B2B e-commerce platforms",
            "D2C brand building tools",
        ],
    },
    "Education": {
        "trends": [
            "Hybrid learning models becoming permanent",
            "Micro-credentials and skill-based learning",
            "Gamification and interactive content",
        ],
        "challenges": [
            "Student engagement and retention",
            "Content creation costs",
            "Competition from free resources",
        ],
        "opportunities": [
            "Corporate training and upskilling",
            "Language learning platforms",
            "Specialized skill training",
        ],
    },
}

DEFAULT_INDUSTRY_INSIGHTS: dict[str, list[str]] = {
    "trends": ["Industry showing steady growth"],
    "challenges": ["Market competition", "Customer acquisition"],
    "opportunities": ["Digital transformation", "Emerging markets"],
}

# Stage → (typical raise, investor types, example round amounts)
STAGE_FUNDING: dict[str, tuple[str, list[str], list[str]]] = {
    "idea": (
        "$75K - $750K",
        ["Angel Investors", "Friends & Family", "Pre-seed Funds", "Accelerators"],
        ["$150K", "$350K", "$500K"],
    ),
    "mvp": (
        "$500K - $3M",
        ["Seed Funds", "Angel Groups", "Early-stage VCs", "Corporate VCs"],
        ["$1.2M", "$2.5M", "$3M"],
    ),
    "launched": (
        "$1M - $8M",
        ["Seed Funds", "Series A VCs", "Strategic Investors", "Family Offices"],
        ["$2M", "$5M", "$7M"],
    ),
    "growing": (
        "$5M - $25M",
        ["Series A VCs", "Growth Investors", "Corporate VCs", "Private Equity"],
        ["$8M", "$15M", "$22M"],
    ),
}

# Days before today for each example round.
_ROUND_AGES_DAYS = (14, 41, 77)

# (keywords, complexity, resources, tech stack); first match wins
FEASIBILITY_RULES: list[tuple[tuple[str, ...], str, list[str], list[str]]] = [
    (
        ("ai", "machine learning", "ml", "blockchain", "crypto"),
        "high",
        ["AI/ML Engineers", "Data Scientists", "Cloud Infrastructure"],
        ["Python", "TensorFlow/PyTorch", "Cloud AI Services"],
    ),
    (
        ("app", "mobile", "software", "platform"),
        "medium",
        ["Software Developers", "UI/UX Designers", "DevOps"],
        ["React/Next.js", "Node.js", "PostgreSQL/MongoDB", "AWS/Vercel"],
    ),
    (
        ("website", "landing page"),
        "low",
        ["Web Developer", "Designer"],
        ["React", "Tailwind CSS", "Hosting Platform"],
    ),
]

INDUSTRY_COMPLIANCE: dict[str, tuple[list[str], list[str]]] = {
    "Healthcare": (["HIPAA Compliance Expert", "Medical Advisor"], ["HIPAA-compliant Infrastructure"]),
    "Finance": (["Security Expert", "Compliance Officer"], ["PCI-DSS Compliant Systems", "Encryption Tools"]),
}


def _c(name: str, description: str, similarity: int) -> Competitor:
    return Competitor(name=name, description=description, similarity=similarity)


# Solution keyword tables, checked in order before the industry table.
SOLUTION_FALLBACK_COMPETITORS: list[tuple[tuple[str, ...], list[tuple[str, str, int]]]] = [
    (("payment", "pay", "finance"), [
        ("Stripe", "Payment processing infrastructure", 85),
        ("Square", "Point-of-sale and payment solutions", 75),
        ("PayPal", "Digital payment platform", 70),
        ("Plaid", "Financial data connectivity", 65),
    ]),
    (("healthcare", "health", "medical"), [
        ("Teladoc", "Virtual healthcare platform", 80),
        ("Zocdoc", "Healthcare appointment booking", 70),
        ("23andMe", "Genetic testing services", 60),
        ("Headspace", "Mental health and wellness app", 55),
    ]),
    (("education", "learn", "teach", "course"), [
        ("Coursera", "Online courses and degrees", 75),
        ("Udemy", "Skill-based learning platform", 70),
        ("Khan Academy", "Free educational resources", 65),
        ("Duolingo", "Language learning platform", 60),
    ]),
    (("ecommerce", "marketplace", "shop", "retail"), [
        ("Shopify", "E-commerce platform for businesses", 80),
        ("Amazon", "Online marketplace and retail", 75),
        ("Etsy", "Handmade and vintage marketplace", 70),
        ("BigCommerce", "SaaS e-commerce platform", 65),
    ]),
    (("ai", "machine learning", "artificial intelligence"), [
        ("OpenAI", "AI research and development company", 85),
        ("Anthropic", "AI safety and research", 75),
        ("Cohere", "Enterprise AI platform", 70),
        ("Hugging Face", "AI model sharing platform", 65),
    ]),
    (("software", "saas", "platform", "app"), [
        ("Salesforce", "CRM and cloud software", 75),
        ("Microsoft", "Enterprise software solutions", 70),
        ("Slack", "Team collaboration platform", 65),
        ("Notion", "All-in-one workspace", 60),
    ]),
    (("food", "delivery", "restaurant"), [
        ("DoorDash", "Food delivery platform", 80),
        ("Uber Eats", "Food delivery service", 75),
        ("Grubhub", "Food ordering and delivery", 70),
        ("Instacart", "Grocery delivery service", 65),
    ]),
    (("travel", "booking", "hotel"), [
        ("Airbnb", "Home sharing and travel platform", 80),
        ("Booking.com", "Travel booking platform", 75),
        ("Expedia", "Online travel booking", 70),
        ("TripAdvisor", "Travel reviews and booking", 65),
    ]),
]

INDUSTRY_FALLBACK_COMPETITORS: dict[str, list[tuple[str, str, int]]] = {
    "Technology": [
        ("Microsoft", "Enterprise software solutions", 60),
        ("Google", "Cloud and AI services", 55),
        ("Amazon Web Services", "Cloud computing infrastructure", 50),
        ("Apple", "Consumer technology products", 45),
    ],
    "Healthcare": [
        ("Teladoc", "Telemedicine platform", 70),
        ("23andMe", "Genetic testing services", 60),
        ("Zocdoc", "Healthcare appointment booking", 55),
        ("Headspace", "Mental health and wellness", 50),
    ],
    "Finance": [
        ("Stripe", "Payment processing", 75),
        ("Plaid", "Financial data connectivity", 65),
        ("Robinhood", "Commission-free trading platform", 60),
        ("Chime", "Digital banking platform", 55),
    ],
    "E-commerce": [
        ("Shopify", "E-commerce platform for businesses", 75),
        ("Amazon", "Online marketplace and retail", 70),
        ("Etsy", "Handmade and vintage marketplace", 65),
        ("BigCommerce", "SaaS e-commerce platform", 60),
    ],
    "Education": [
        ("Coursera", "Online learning platform", 75),
        ("Udemy", "Online course marketplace", 70),
        ("Khan Academy", "Free online educational platform", 65),
        ("Duolingo", "Language learning app", 60),
    ],
    "Entertainment": [
        ("Netflix", "Streaming entertainment platform", 70),
        ("Spotify", "Music streaming service", 65),
        ("Disney+", "Entertainment streaming", 60),
        ("YouTube", "Video sharing platform", 55),
    ],
    "Real Estate": [
        ("Zillow", "Real estate marketplace", 75),
        ("Redfin", "Real estate brokerage", 70),
        ("Realtor.com", "Real estate listings", 65),
        ("Airbnb", "Property rental platform", 60),
    ],
    "Transportation": [
        ("Uber", "Ride-sharing platform", 75),
        ("Lyft", "Ride-sharing service", 70),
        ("DoorDash", "Food delivery platform", 65),
        ("Instacart", "Grocery delivery service", 60),
    ],
}

# Solution keywords → related industry table, for industries without one.
RELATED_INDUSTRY_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("tech", "software", "app"), "Technology"),
    (("health", "medical"), "Healthcare"),
    (("finance", "pay", "money"), "Finance"),
    (("shop", "sell", "marketplace"), "E-commerce"),
    (("learn", "teach", "school"), "Education"),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(k in text for k in keywords)


async def _get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: Optional[dict[str, Any]] = None,
    timeout: float,
    source: str,
) -> Optional[dict[str, Any]]:
    """GET *url* and return the decoded JSON body, or None on any failure."""
    try:
        response = await client.get(url, params=params, timeout=timeout)
    except httpx.HTTPError as exc:
        logger.warning("[DATA] %s request failed: %s", source, exc)
        return None
    if response.status_code != 200:
        logger.warning("[DATA] %s returned HTTP %s", source, response.status_code)
        return None
    try:
        payload = response.json()
    except ValueError:
        logger.warning("[DATA] %s returned a non-JSON body", source)
        return None
    return payload if isinstance(payload, dict) else None


async def _duckduckgo(client: httpx.AsyncClient, query: str, timeout: float) -> Optional[dict[str, Any]]:
    return await _get_json(
        client,
        DUCKDUCKGO_URL,
        params={"q": query, "format": "json", "no_html": "1"},
        timeout=timeout,
        source="DuckDuckGo",
    )


async def _wikipedia_extract(client: httpx.AsyncClient, title: str, timeout: float) -> str:
    url = WIKIPEDIA_SUMMARY_URL.format(title=quote(title, safe=""))
    data = await _get_json(client, url, timeout=timeout, source="Wikipedia")
    if not data:
        return ""
    return str(data.get("extract") or "")


# ---------------------------------------------------------------------------
# Market size
# ---------------------------------------------------------------------------

@dataclass
class MarketSizeEstimate:
    total: float
    addressable: float
    growth: float


def parse_market_size(extract: str) -> Optional[float]:
    """First "N billion|million|trillion" mention in *extract*, in billions."""
    match = _SIZE_PATTERN.search(extract or "")
    if not match:
        return None
    value = float(match.group(1))
    unit = match.group(2).lower()
    if unit == "trillion":
        return float(round_half_up(value * 1000))
    if unit == "billion":
        return float(round_half_up(value))
    return round(value / 1000, 1)


def addressable_multiplier(solution: str) -> float:
    lowered = (solution or "").lower()
    for keywords, multiplier in ADDRESSABLE_MULTIPLIERS:
        if _contains_any(lowered, keywords):
            return multiplier
    return DEFAULT_ADDRESSABLE_MULTIPLIER


async def fetch_market_size(
    client: httpx.AsyncClient,
    industry: str,
    solution: str,
    *,
    timeout: float = 5.0,
) -> MarketSizeEstimate:
    """Total market from the industry table, or a Wikipedia mention for unlisted industries."""
    if industry in INDUSTRY_MARKET_SIZES:
        total, growth = INDUSTRY_MARKET_SIZES[industry]
    else:
        extract = await _wikipedia_extract(client, f"{industry}_industry", timeout)
        total = parse_market_size(extract) or DEFAULT_MARKET_SIZE
        growth = DEFAULT_GROWTH

    addressable = round(total * addressable_multiplier(solution), 1)
    print(f"📊 [DATA] Market size for {industry}: total={total}B addressable={addressable}B growth={growth}%")
    return MarketSizeEstimate(total=total, addressable=addressable, growth=growth)


# ---------------------------------------------------------------------------
# Competitors
# ---------------------------------------------------------------------------

_LEADING_NAME = re.compile(r"^([^\-:(]+)")
_ARTICLE = re.compile(r"^(The|A|An)\s+", re.IGNORECASE)


def _similarity_pct(solution: str, text: str) -> int:
    return round_half_up(calculate_similarity(solution, text) * 100)


def parse_competitors(payload: dict[str, Any], solution: str, industry: str, found: list[Competitor]) -> None:
    """Append competitors named in a DuckDuckGo payload to *found* (deduped by name)."""
    seen = {c.name.lower() for c in found}

    for topic in payload.get("RelatedTopics") or []:
        text = topic.get("Text") if isinstance(topic, dict) else None
        if not text or len(found) >= _COLLECT_LIMIT:
            continue
        match = _LEADING_NAME.match(text)
        name = _ARTICLE.sub("", match.group(1).strip()) if match else text[:40]
        if 2 < len(name) < 60 and name.lower() not in seen:
            description = text[len(name) + 1:].strip()[:150] or f"{name} in {industry}"
            found.append(Competitor(
                name=name,
                description=description,
                similarity=_similarity_pct(solution, text),
            ))
            seen.add(name.lower())

    if len(found) >= _COLLECT_LIMIT:
        return

    for result in payload.get("Results") or []:
        if not isinstance(result, dict):
            continue
        text = result.get("Text")
        url = result.get("FirstURL")
        if not text or not url:
            continue
        parts = url.split("/")
        domain = parts[2].replace("www.", "") if len(parts) > 2 else ""
        name = re.split(r"[-:]", text)[0].strip() or domain.split(".")[0]
        if name and name.lower() not in seen:
            found.append(Competitor(
                name=name,
                description=text[:150],
                website=url,
                similarity=_similarity_pct(solution, text),
            ))
            seen.add(name.lower())


def get_fallback_competitors(solution: str, industry: str) -> list[Competitor]:
    """Static competitor list keyed on solution keywords, then industry."""
    lowered = (solution or "").lower()

    for keywords, rows in SOLUTION_FALLBACK_COMPETITORS:
        if _contains_any(lowered, keywords):
            return [_c(*row) for row in rows]

    if industry in INDUSTRY_FALLBACK_COMPETITORS:
        return [_c(*row) for row in INDUSTRY_FALLBACK_COMPETITORS[industry]]

    for keywords, related in RELATED_INDUSTRY_KEYWORDS:
        if _contains_any(lowered, keywords):
            return [_c(*row) for row in INDUSTRY_FALLBACK_COMPETITORS[related]]

    label = industry or "technology"
    return [
        _c("Industry Leader", f"Major player in {label}", 50),
        _c("Established Competitor", f"Well-known {industry or 'tech'} company", 45),
        _c("Market Player", f"Active competitor in {label} sector", 40),
    ]


async def fetch_competitors(
    client: httpx.AsyncClient,
    solution: str,
    industry: str,
    *,
    timeout: float = 4.0,
) -> list[Competitor]:
    """Up to six competitors, most similar first, padded from the fallback table below three."""
    queries = [f"{solution} alternative", f"{solution} competitor", f"{solution} vs"]
    payloads = await asyncio.gather(*(_duckduckgo(client, q, timeout) for q in queries))

    found: list[Competitor] = []
    for payload in payloads:
        if payload:
            parse_competitors(payload, solution, industry, found)

    result = sorted(found, key=lambda c: c.similarity or 0, reverse=True)[:MAX_COMPETITORS]

    if not result:
        print(f"🔁 [DATA] No competitors found online, using fallback table ({industry})")
        return get_fallback_competitors(solution, industry)

    if len(result) < MIN_COMPETITORS:
        names = {c.name.lower() for c in result}
        for fallback in get_fallback_competitors(solution, industry):
            if fallback.name.lower() not in names:
                result.append(fallback)
                names.add(fallback.name.lower())
        result = result[:MAX_COMPETITORS]

    print(f"🏁 [DATA] Competitors: {[c.name for c in result]}")
    return result


# ---------------------------------------------------------------------------
# Market validation
# ---------------------------------------------------------------------------

def _platform_for(url: str) -> str:
    if "github" in url:
        return "GitHub"
    if "producthunt" in url:
        return "Product Hunt"
    if "reddit" in url:
        return "Reddit"
    return "Web"


def default_market_validation() -> MarketValidation:
    return MarketValidation(
        search_trends="Moderate interest",
        discussion_activity="Limited discussion",
        existing_products=[],
    )


async def fetch_market_validation(
    client: httpx.AsyncClient,
    problem: str,
    *,
    timeout: float = 4.0,
) -> MarketValidation:
    query = f"{' '.join(extract_keywords(problem)[:3])} problem solution"
    payload = await _duckduckgo(client, query, timeout)
    if payload is None:
        return default_market_validation()

    topics = payload.get("RelatedTopics") or []
    if len(topics) > 5:
        discussion = "High discussion volume - strong market signal"
    elif len(topics) > 2:
        discussion = "Moderate discussion - validate market need"
    else:
        discussion = "Low discussion - may indicate untapped opportunity or lack of market"

    products: list[ExistingProduct] = []
    for result in (payload.get("Results") or [])[:5]:
        if not isinstance(result, dict):
            continue
        text, url = result.get("Text"), result.get("FirstURL")
        if text and url:
            products.append(ExistingProduct(
                name=re.split(r"[-:]", text)[0].strip(),
                platform=_platform_for(url),
                url=url,
            ))

    if len(products) > 3:
        trends = "High search interest - competitive market"
    elif len(products) > 1:
        trends = "Moderate search interest - emerging market"
    else:
        trends = "Low search interest - validate market demand"

    return MarketValidation(search_trends=trends, discussion_activity=discussion, existing_products=products)


# ---------------------------------------------------------------------------
# Industry insights
# ---------------------------------------------------------------------------

def summary_sentences(extract: str) -> list[str]:
    sentences = [s for s in (extract or "").split(".") if len(s) > 50]
    return [s.strip()[:200] for s in sentences[:3]]


def relevant_trends(trends: list[str], solution: str, industry: str) -> list[str]:
    """Keep trends sharing a >4-letter word with the solution or naming the industry."""
    words = [w for w in (solution or "").lower().split() if len(w) > 4]
    industry_lower = (industry or "").lower()
    kept = []
    for trend in trends:
        lowered = trend.lower()
        if any(w in lowered for w in words) or (industry_lower and industry_lower in lowered):
            kept.append(trend)
    return kept


def default_industry_insights(industry: str, solution: str, extra_trends: Optional[list[str]] = None) -> IndustryInsights:
    """Industry table insights, optionally led by sentences from a live summary."""
    table = INDUSTRY_INSIGHTS.get(industry, DEFAULT_INDUSTRY_INSIGHTS)

    trends = ((extra_trends or []) + table["trends"])[:5]
    return IndustryInsights(
        trends=relevant_trends(trends, solution, industry),
        challenges=list(table["challenges"]),
        opportunities=list(table["opportunities"]),
    )


async def fetch_industry_insights(
    client: httpx.AsyncClient,
    industry: str,
    solution: str,
    *,
    timeout: float = 5.0,
) -> IndustryInsights:
    extract = await _wikipedia_extract(client, industry, timeout)
    return default_industry_insights(industry, solution, summary_sentences(extract))


# ---------------------------------------------------------------------------
# Funding landscape / technical feasibility (static)
# ---------------------------------------------------------------------------

def build_funding_landscape(industry: str, stage: str, today: Optional[date] = None) -> FundingInfo:
    average, investors, amounts = STAGE_FUNDING.get(stage, STAGE_FUNDING["idea"])
    today = today or date.today()
    rounds = [
        FundingRound(
            company=f"{industry} Startup {i + 1}",
            amount=amount,
            date=(today - timedelta(days=_ROUND_AGES_DAYS[i])).isoformat(),
        )
        for i, amount in enumerate(amounts)
    ]
    return FundingInfo(average_funding=average, typical_investors=list(investors), recent_rounds=rounds)


def assess_technical_feasibility(solution: str, industry: str) -> TechnicalFeasibility:
    lowered = (solution or "").lower()
    complexity = "medium"
    resources: list[str] = []
    stack: list[str] = []

    for keywords, tier, rule_resources, rule_stack in FEASIBILITY_RULES:
        if _contains_any(lowered, keywords):
            complexity = tier
            resources.extend(rule_resources)
            stack.extend(rule_stack)
            break

    if industry in INDUSTRY_COMPLIANCE:
        extra_resources, extra_stack = INDUSTRY_COMPLIANCE[industry]
        resources.extend(extra_resources)
        stack.extend(extra_stack)

    return TechnicalFeasibility(
        complexity=complexity,
        required_resources=resources or ["Development Team"],
        similar_tech_stack=stack or ["Standard Web Stack"],
    )


# ---------------------------------------------------------------------------
# Recent news
# ---------------------------------------------------------------------------

async def fetch_recent_news(
    client: httpx.AsyncClient,
    solution: str,
    problem: str,
    industry: str,
    api_key: Optional[str],
    *,
    timeout: float = 5.0,
) -> list[NewsItem]:
    """Top three NewsAPI articles; empty without a key."""
    if not api_key:
        return []

    query = f"{' '.join(extract_keywords(solution))} OR {' '.join(extract_keywords(problem))} {industry}"
    data = await _get_json(
        client,
        NEWSAPI_URL,
        params={
            "q": query,
            "sortBy": "popularity",
            "pageSize": 5,
            "language": "en",
            "apiKey": api_key,
        },
        timeout=timeout,
        source="NewsAPI",
    )
    if not data:
        return []

    items: list[NewsItem] = []
    for article in (data.get("articles") or [])[:3]:
        if not isinstance(article, dict) or not article.get("title"):
            continue
        items.append(NewsItem(
            title=article["title"],
            source=(article.get("source") or {}).get("name") or "Unknown",
            date=article.get("publishedAt") or "",
            url=article.get("url"),
        ))
    return items
