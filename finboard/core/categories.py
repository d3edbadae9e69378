"""Transaction category taxonomy.

An ordered table of (category, keywords). Categorization scans it top to
bottom and the first category with a matching keyword wins, so the order
of entries is significant: "walmart" resolves to Groceries, not Shopping.
Keywords are lowercase substrings.
"""

OTHER_CATEGORY = "Other"

CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    # Essential
    ("Groceries", (
        "grocery", "supermarket", "whole foods", "trader joe", "safeway", "kroger",
        "food", "market", "walmart", "target", "costco", "aldi", "publix", "food lion",
    )),
    ("Rent", ("rent", "apartment", "landlord", "housing")),
    ("Mortgage", ("mortgage", "home loan", "house payment")),
    ("Transportation", (
        "gas", "fuel", "uber", "lyft", "taxi", "metro", "bus", "parking", "car",
        "vehicle", "auto", "shell", "exxon", "bp", "transit", "train", "subway",
    )),
    ("Utilities", (
        "electric", "electricity", "water", "gas bill", "internet", "phone", "cable",
        "verizon", "att", "comcast", "utility", "power", "energy",
    )),
    ("Insurance", (
        "insurance", "policy", "premium", "coverage", "geico", "state farm",
        "allstate", "progressive", "nationwide", "liberty mutual",
    )),
    ("Healthcare", (
        "doctor", "hospital", "pharmacy", "medical", "dentist", "health", "cvs",
        "walgreens", "clinic", "prescription", "therapy", "healthcare",
    )),
    # Lifestyle
    ("Dining Out", (
        "restaurant", "cafe", "starbucks", "mcdonalds", "pizza", "takeout", "delivery",
        "doordash", "grubhub", "ubereats", "dining", "eatery", "diner", "bistro",
    )),
    ("Entertainment", (
        "movie", "cinema", "netflix", "spotify", "game", "concert", "theater",
        "entertainment", "disney", "hulu", "amazon prime", "ticket", "show", "event",
    )),
    ("Shopping", (
        "amazon", "target", "walmart", "store", "mall", "clothing", "shoes",
        "electronics", "best buy", "apple store", "retail", "purchase", "shop",
    )),
    ("Travel", (
        "hotel", "airbnb", "flight", "airline", "vacation", "trip", "booking",
        "expedia", "airfare", "lodging", "resort", "travel",
    )),
    ("Subscriptions", (
        "subscription", "monthly", "annual", "premium", "plus", "pro", "membership",
        "recurring", "service",
    )),
    ("Personal Care", (
        "salon", "haircut", "spa", "massage", "beauty", "cosmetics", "barber",
        "grooming", "skincare", "makeup",
    )),
    # Financial
    ("Salary", (
        "salary", "payroll", "wages", "income", "paycheck", "direct deposit",
        "employer", "compensation", "earnings",
    )),
    ("Investments", (
        "investment", "stock", "etf", "mutual fund", "brokerage", "dividend",
        "capital gain", "securities", "portfolio",
    )),
    ("Savings", ("savings", "deposit", "transfer to savings", "emergency fund", "reserve")),
    ("Debt Payment", (
        "loan payment", "credit card payment", "debt", "student loan", "personal loan",
        "finance charge", "interest",
    )),
    ("Taxes", (
        "tax", "irs", "state tax", "property tax", "tax payment", "tax return", "tax refund",
    )),
    ("Retirement", ("401k", "ira", "retirement", "pension", "roth", "retirement contribution")),
    # Home
    ("Home Maintenance", (
        "maintenance", "repair", "plumber", "electrician", "lawn", "gardening",
        "cleaning service", "home service",
    )),
    ("Home Improvement", (
        "renovation", "remodel", "improvement", "home depot", "lowes", "hardware",
        "construction", "contractor",
    )),
    ("Furniture", (
        "furniture", "couch", "table", "chair", "bed", "mattress", "desk", "ikea",
        "ashley furniture",
    )),
    ("Appliances", (
        "appliance", "refrigerator", "washer", "dryer", "dishwasher", "microwave",
        "oven", "vacuum",
    )),
    ("Household Supplies", (
        "household", "supplies", "cleaning", "laundry", "paper towels", "toilet paper",
        "detergent",
    )),
    # Family
    ("Childcare", ("childcare", "daycare", "babysitter", "nanny", "child support", "children")),
    ("Education", (
        "school", "university", "course", "book", "tuition", "education", "college",
        "learning", "student", "class",
    )),
    ("Pet Expenses", (
        "pet", "veterinarian", "vet", "dog", "cat", "pet food", "pet supplies",
        "grooming", "pet care",
    )),
    ("Gifts", (
        "gift", "present", "birthday", "anniversary", "holiday", "christmas", "wedding gift",
    )),
    ("Charity", (
        "charity", "donation", "donate", "charitable", "non-profit", "fundraiser",
        "contribution",
    )),
    ("Family Support", (
        "family", "support", "allowance", "assistance", "relative", "parent", "sibling",
    )),
    # Miscellaneous
    ("Hobbies", (
        "hobby", "craft", "art", "music", "instrument", "photography", "collection",
        "sports equipment",
    )),
    ("Fitness", (
        "gym", "fitness", "workout", "exercise", "sports", "athletic", "training",
        "yoga", "pilates",
    )),
    ("Electronics", (
        "electronics", "gadget", "computer", "laptop", "phone", "tablet", "camera",
        "headphones", "speaker",
    )),
    ("Clothing", (
        "clothing", "apparel", "clothes", "shoes", "fashion", "accessory", "jewelry", "watch",
    )),
    ("Professional Services", (
        "lawyer", "accountant", "consultant", "advisor", "professional", "service",
        "legal", "financial advisor",
    )),
    # Income
    ("Bonus", ("bonus", "performance bonus", "holiday bonus", "incentive")),
    ("Commission", ("commission", "sales commission", "referral fee")),
    ("Freelance", ("freelance", "contract work", "gig", "self-employed", "consulting")),
    ("Business", ("business income", "profit", "revenue", "business", "sale")),
    ("Dividends", ("dividend", "distribution", "capital distribution")),
    ("Interest", ("interest", "interest income", "interest payment")),
    ("Rental", ("rent income", "rental", "tenant", "property income", "airbnb income")),
    ("Refund", ("refund", "reimbursement", "return", "cashback", "money back")),
    ("Gift", ("gift received", "money gift", "cash gift")),
    ("Tax Return", ("tax return", "tax refund", "irs refund")),
)

CATEGORY_NAMES: tuple[str, ...] = tuple(name for name, _ in CATEGORY_KEYWORDS) + (OTHER_CATEGORY,)
