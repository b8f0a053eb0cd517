"""
Category vocabulary shared by methodology presets, validation and seed data.
"""

# Parent categories every methodology groups over.
MODERN_CATEGORIES = [
    "Food & Dining",
    "Housing & Utilities",
    "Transportation",
    "Entertainment & Leisure",
    "Personal Care & Health",
    "Technology & Communication",
    "Family & Education",
    "Financial & Admin",
    "Pets",
    "Gifts & Charity",
    "Miscellaneous",
]

# Section colours used by the percentage-based presets.
SECTION_COLORS = {
    "coral": "#F87171",
    "yellow": "#FBBF24",
    "mint": "#34D399",
    "blue": "#60A5FA",
}

# Default bank-category mappings: (raw id, parent, child, icon).
DEFAULT_CATEGORY_MAPPINGS = [
    ("groceries", "Food & Dining", "Groceries", "🛒"),
    ("restaurants-and-cafes", "Food & Dining", "Restaurants & Cafes", "🍽️"),
    ("takeaway", "Food & Dining", "Takeaway", "🥡"),
    ("booze", "Food & Dining", "Booze", "🍷"),
    ("rent-and-mortgage", "Housing & Utilities", "Rent & Mortgage", "🏠"),
    ("utilities", "Housing & Utilities", "Utilities", "💡"),
    ("internet", "Housing & Utilities", "Internet", "🌐"),
    ("homeware-and-appliances", "Housing & Utilities", "Homeware & Appliances", "🛋️"),
    ("fuel", "Transportation", "Fuel", "⛽"),
    ("public-transport", "Transportation", "Public Transport", "🚆"),
    ("parking", "Transportation", "Parking", "🅿️"),
    ("taxis-and-share-cars", "Transportation", "Taxis & Share Cars", "🚕"),
    ("tv-and-music", "Entertainment & Leisure", "TV, Music & Streaming", "📺"),
    ("hobbies", "Entertainment & Leisure", "Hobbies", "🎨"),
    ("holidays-and-travel", "Entertainment & Leisure", "Holidays & Travel", "✈️"),
    ("health-and-medical", "Personal Care & Health", "Health & Medical", "⚕️"),
    ("fitness-and-wellbeing", "Personal Care & Health", "Fitness & Wellbeing", "🏋️"),
    ("clothing-and-accessories", "Personal Care & Health", "Clothing & Accessories", "👕"),
    ("mobile-phone", "Technology & Communication", "Mobile Phone", "📱"),
    ("technology", "Technology & Communication", "Technology", "💻"),
    ("children-and-family", "Family & Education", "Children & Family", "👪"),
    ("education-and-student-loans", "Family & Education", "Education & Student Loans", "🎓"),
    ("investments", "Financial & Admin", "Investments", "📈"),
    ("life-admin", "Financial & Admin", "Life Admin", "🗂️"),
    ("internal-transfer", "Financial & Admin", "Internal Transfers", "🔁"),
    ("salary-income", "Financial & Admin", "Salary & Income", "💰"),
    ("pets", "Pets", "Pets", "🐾"),
    ("gifts-and-charity", "Gifts & Charity", "Gifts & Charity", "🎁"),
]
