"""Curated term lists shared by the analyzers.

All entries are lowercase. Display casing comes from the analyzed text, with
``DISPLAY_CASE`` as the fallback when a term is synthesized rather than quoted.
"""

from __future__ import annotations

import re

TOOLS: frozenset[str] = frozenset(
    {
        # support / crm
        "zendesk", "intercom", "freshdesk", "salesforce", "hubspot", "zoho",
        "helpscout", "gorgias", "kustomer",
        # project management
        "jira", "asana", "trello", "notion", "clickup", "basecamp", "confluence",
        "smartsheet", "airtable",
        # communication
        "slack", "microsoft teams", "zoom", "webex",
        # cloud
        "aws", "azure", "gcp", "google cloud", "heroku", "vercel", "netlify",
        "digitalocean", "cloudflare", "firebase",
        # databases
        "postgresql", "postgres", "mysql", "mongodb", "redis", "elasticsearch",
        "dynamodb", "sqlite", "oracle", "sql server", "snowflake", "bigquery",
        # dev tools
        "git", "github", "gitlab", "bitbucket", "docker", "kubernetes", "jenkins",
        "circleci", "terraform", "ansible", "datadog", "splunk", "new relic",
        "sentry", "grafana", "prometheus",
        # design
        "figma", "sketch", "adobe xd", "invision", "miro", "canva",
        # analytics
        "google analytics", "mixpanel", "amplitude", "segment", "hotjar",
        "tableau", "looker", "power bi", "metabase", "excel",
        # marketing / commerce
        "marketo", "mailchimp", "sendgrid", "twilio", "stripe", "shopify",
        "magento", "wordpress", "webflow",
        # ai / ml
        "openai", "langchain", "huggingface", "tensorflow", "pytorch",
        "scikit-learn", "pandas", "numpy",
    }
)

TECH_SKILLS: frozenset[str] = frozenset(
    {
        # languages
        "javascript", "typescript", "python", "java", "c#", "c++", "golang",
        "ruby", "php", "swift", "kotlin", "rust", "scala", "perl", "bash",
        "powershell", "sql", "graphql", "html", "css", "sass",
        # frontend
        "react", "reactjs", "react.js", "angular", "vue", "vue.js", "svelte",
        "next.js", "nuxt", "jquery",
        # backend
        "node.js", "nodejs", "express", "django", "flask", "fastapi", "rails",
        "ruby on rails", "spring", "spring boot", "laravel", "asp.net", ".net",
        # mobile
        "react native", "flutter", "swiftui", "android",
        # data
        "spark", "hadoop", "kafka", "airflow", "dbt", "machine learning",
        "deep learning", "nlp", "computer vision",
        # infra
        "ci/cd", "devops", "sre", "k8s", "linux", "unix", "nginx",
        # apis
        "rest", "restful", "api", "apis", "grpc", "websocket", "oauth", "json",
        "xml", "yaml", "microservices",
    }
)

SOFT_SKILLS: frozenset[str] = frozenset(
    {
        "communication", "written communication", "verbal communication",
        "presentation", "public speaking", "active listening", "empathy",
        "teamwork", "collaboration", "cross-functional", "stakeholder management",
        "problem solving", "problem-solving", "critical thinking", "analytical",
        "troubleshooting", "debugging", "root cause analysis",
        "leadership", "mentorship", "mentoring", "coaching", "team management",
        "time management", "prioritization", "multitasking", "attention to detail",
        "organization", "planning", "customer service", "customer support",
        "customer success", "customer experience", "customer satisfaction",
        "adaptability", "flexibility", "agile", "scrum",
    }
)

COMPOUND_SKILLS: frozenset[str] = frozenset(
    {
        "technical support", "phone support", "email support", "live chat",
        "ticket management", "escalation management", "help desk", "service desk",
        "workflow automation", "process automation", "data analysis",
        "data visualization", "database management", "version control",
        "code review", "unit testing", "integration testing", "test automation",
        "project management", "product management", "account management",
        "vendor management", "change management", "risk management",
        "quality assurance", "quality control", "continuous improvement",
        "process improvement", "distributed systems", "system design",
    }
)

CERTIFICATIONS: frozenset[str] = frozenset(
    {
        "aws certified", "azure certified", "google certified", "pmp",
        "scrum master", "csm", "itil", "comptia", "security+", "cissp", "cism",
        "cisa", "ccna", "cpa", "cfa", "six sigma", "lean six sigma",
    }
)

UNIVERSAL_SOFT_SKILLS: tuple[str, ...] = (
    "communication",
    "problem solving",
    "analytical",
    "teamwork",
    "collaboration",
    "leadership",
    "attention to detail",
    "time management",
    "organization",
    "adaptability",
    "critical thinking",
)

STOP_WORDS: frozenset[str] = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "has",
        "have", "in", "is", "it", "its", "of", "on", "or", "our", "that", "the",
        "their", "this", "to", "we", "will", "with", "you", "your", "us", "role",
        "team", "work", "job", "company", "ability", "experience", "years",
        "year", "plus", "etc", "e.g", "i.e", "ok", "eoe", "usa", "u.s",
        "faq", "hr", "tbd", "n/a", "asap", "eeo", "pto", "ceo", "inc",
        # degree abbreviations are handled by knockout rules
        "bs", "ba", "ms", "ma", "mba", "phd", "ph.d", "b.s", "b.a", "m.s", "m.a",
        "bs/ba", "ms/ma", "ged",
    }
)

REQUIREMENT_MARKERS: tuple[str, ...] = (
    "required",
    "requires",
    "require",
    "must have",
    "must be",
    "must",
    "minimum",
    "mandatory",
    "essential",
    "at least",
    "you will need",
    "you should have",
    "proficiency in",
    "proficient in",
    "expertise in",
    "certified",
    "certification",
)

PREFERENCE_MARKERS: tuple[str, ...] = (
    "preferred",
    "nice to have",
    "nice-to-have",
    "bonus",
    "a plus",
    "desirable",
    "optional",
)

REQUIREMENT_HEADINGS: frozenset[str] = frozenset(
    {
        "requirements",
        "required",
        "required qualifications",
        "required skills",
        "minimum qualifications",
        "basic qualifications",
        "qualifications",
        "must have",
        "must haves",
        "must-haves",
        "what you need",
        "what you'll need",
        "what we're looking for",
        "who you are",
    }
)

PREFERENCE_HEADINGS: frozenset[str] = frozenset(
    {
        "preferred",
        "preferred qualifications",
        "preferred skills",
        "nice to have",
        "nice to haves",
        "nice-to-have",
        "bonus points",
        "bonus",
        "pluses",
    }
)

# Posting sections that end a requirements or preferences block.
JOB_SECTION_HEADINGS: frozenset[str] = frozenset(
    {
        "about us",
        "about the company",
        "about the role",
        "about the team",
        "about you",
        "benefits",
        "compensation",
        "compensation and benefits",
        "equal opportunity",
        "equal opportunity employer",
        "how to apply",
        "our team",
        "perks",
        "perks and benefits",
        "responsibilities",
        "key responsibilities",
        "salary",
        "the role",
        "what we offer",
        "what you'll do",
        "what you will do",
        "who we are",
        "why join us",
        "why you'll love working here",
    }
)

TITLE_SYNONYMS: dict[str, tuple[str, ...]] = {
    "software engineer": ("software developer", "swe", "programmer", "developer", "software development engineer"),
    "frontend engineer": ("frontend developer", "front-end developer", "front end developer", "ui engineer", "ui developer"),
    "backend engineer": ("backend developer", "back-end developer", "back end developer", "server engineer"),
    "full stack engineer": ("full stack developer", "fullstack developer", "full-stack engineer", "full-stack developer"),
    "data scientist": ("machine learning engineer", "ml engineer", "applied scientist"),
    "data engineer": ("analytics engineer", "etl developer", "big data engineer"),
    "data analyst": ("business analyst", "bi analyst", "analytics specialist"),
    "product manager": ("product owner", "product lead"),
    "project manager": ("program manager", "delivery manager"),
    "devops engineer": ("site reliability engineer", "sre", "platform engineer", "infrastructure engineer"),
    "qa engineer": ("test engineer", "sdet", "quality assurance engineer", "automation engineer"),
    "ux designer": ("ui designer", "product designer", "ux/ui designer", "interaction designer"),
    "marketing manager": ("marketing lead", "growth manager", "digital marketing manager"),
    "sales representative": ("sales rep", "account executive", "business development representative"),
    "customer success manager": ("customer support specialist", "account manager", "client success manager"),
    "support engineer": ("technical support engineer", "support specialist", "help desk technician"),
}

INDUSTRY_TERMS: dict[str, tuple[str, ...]] = {
    "tech": ("saas", "b2b", "b2c", "api", "sdk", "microservices", "cloud", "agile", "scrum", "devops", "ci/cd"),
    "finance": ("fintech", "banking", "trading", "compliance", "regulatory", "portfolio", "investment", "gaap", "audit"),
    "healthcare": ("hipaa", "ehr", "emr", "clinical", "patient", "medical", "pharmaceutical", "fda"),
    "ecommerce": ("marketplace", "retail", "inventory", "fulfillment", "checkout", "payments"),
    "marketing": ("seo", "sem", "ppc", "conversion", "campaign", "brand", "funnel"),
    "sales": ("quota", "pipeline", "prospecting", "crm", "revenue"),
    "hr": ("recruiting", "talent acquisition", "onboarding", "payroll", "hris"),
}

SENIORITY_LEVELS: tuple[str, ...] = (
    "intern",
    "junior",
    "associate",
    "mid-level",
    "senior",
    "staff",
    "principal",
    "lead",
    "manager",
    "director",
    "vp",
    "head of",
    "chief",
)

ACTION_VERBS: tuple[str, ...] = (
    "achieved", "built", "created", "delivered", "developed", "designed",
    "established", "executed", "generated", "implemented", "improved",
    "increased", "launched", "led", "managed", "optimized", "produced",
    "reduced", "resolved", "spearheaded", "streamlined", "transformed",
)

CORE_SECTIONS: tuple[str, ...] = ("experience", "education", "skills")

SECTION_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    "experience": (
        re.compile(r"^(?:work |professional |relevant )?experience$"),
        re.compile(r"^(?:work|employment|career|job) history$"),
        re.compile(r"^employment$"),
        re.compile(r"^professional background$"),
    ),
    "education": (
        re.compile(r"^education(?:al background)?$"),
        re.compile(r"^academic (?:background|history|credentials)$"),
        re.compile(r"^education (?:and|&) (?:training|certifications)$"),
    ),
    "skills": (
        re.compile(r"^(?:technical |core |key )?skills(?: (?:and|&) (?:tools|technologies|competencies))?$"),
        re.compile(r"^core competenc(?:y|ies)$"),
        re.compile(r"^(?:tools (?:and|&) )?technologies$"),
        re.compile(r"^areas of expertise$"),
        re.compile(r"^expertise$"),
    ),
    "summary": (
        re.compile(r"^(?:professional |career |executive )?summary$"),
        re.compile(r"^(?:career )?objective$"),
        re.compile(r"^(?:professional )?profile$"),
        re.compile(r"^about(?: me)?$"),
    ),
    "projects": (
        re.compile(r"^(?:selected |key |personal )?projects$"),
        re.compile(r"^portfolio$"),
        re.compile(r"^(?:key )?(?:achievements|accomplishments)$"),
    ),
    "certifications": (
        re.compile(r"^(?:professional )?certifications?$"),
        re.compile(r"^licenses? (?:and|&) certifications?$"),
        re.compile(r"^credentials$"),
    ),
}

DISPLAY_CASE: dict[str, str] = {
    "aws": "AWS",
    "gcp": "GCP",
    "api": "API",
    "apis": "APIs",
    "sql": "SQL",
    "css": "CSS",
    "html": "HTML",
    "nlp": "NLP",
    "ci/cd": "CI/CD",
    "saas": "SaaS",
    "javascript": "JavaScript",
    "typescript": "TypeScript",
    "graphql": "GraphQL",
    "postgresql": "PostgreSQL",
    "mongodb": "MongoDB",
    "mysql": "MySQL",
    "github": "GitHub",
    "gitlab": "GitLab",
    "node.js": "Node.js",
    "hubspot": "HubSpot",
    "pytorch": "PyTorch",
    "tensorflow": "TensorFlow",
    "pmp": "PMP",
    "cissp": "CISSP",
}


def display_term(term: str) -> str:
    lowered = term.lower()
    if lowered in DISPLAY_CASE:
        return DISPLAY_CASE[lowered]
    return " ".join(DISPLAY_CASE.get(word, word.capitalize()) for word in lowered.split())


def is_named_technology(term: str) -> bool:
    key = term.lower()
    return key in TOOLS or key in TECH_SKILLS
