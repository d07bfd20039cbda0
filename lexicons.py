"""
Bilingual (Indonesian / English) word lists for the furniture assistant.

Pure data. Matching helpers live in lexicon_matching.py. Multi-word terms are
listed before the single words they contain so that first-match scans prefer
the longer term ("coffee table" before "table").
"""

# Product categories
CATEGORIES = [
    "coffee table", "meja makan", "meja kopi", "dining table", "sofa bed",
    "sofa", "couch", "settee",
    "meja", "table", "desk",
    "kursi", "chair", "stool",
    "lemari", "cabinet", "wardrobe",
    "rak", "shelf", "bookshelf",
    "buffet", "nakas", "nightstand",
    "ranjang", "bed", "kasur", "mattress",
    "lampu", "lamp",
]

# Canonical Indonesian form for each category term
CATEGORY_SYNONYMS = {
    "coffee table": "meja kopi",
    "dining table": "meja makan",
    "couch": "sofa",
    "settee": "sofa",
    "table": "meja",
    "desk": "meja",
    "chair": "kursi",
    "stool": "kursi",
    "cabinet": "lemari",
    "wardrobe": "lemari",
    "shelf": "rak",
    "bookshelf": "rak",
    "nightstand": "nakas",
    "bed": "ranjang",
    "mattress": "kasur",
    "lamp": "lampu",
}

COLORS = [
    "abu-abu", "putih", "white", "hitam", "black", "coklat", "cokelat", "brown",
    "merah", "red", "biru", "blue", "hijau", "green", "kuning", "yellow",
    "abu", "gray", "grey", "cream", "krem", "beige", "gold", "emas", "silver", "perak",
]

# English -> Indonesian
COLOR_SYNONYMS = {
    "white": "putih",
    "black": "hitam",
    "brown": "coklat",
    "cokelat": "coklat",
    "red": "merah",
    "blue": "biru",
    "green": "hijau",
    "yellow": "kuning",
    "gray": "abu",
    "grey": "abu",
    "abu-abu": "abu",
    "cream": "krem",
    "gold": "emas",
    "silver": "perak",
}

MATERIALS = [
    "kayu jati", "kayu", "wood", "wooden", "teak", "jati", "kulit", "leather",
    "kain", "fabric", "besi", "metal", "rotan", "rattan", "plastik", "plastic",
    "kaca", "glass", "marmer", "marble", "velvet", "beludru", "linen",
    "katun", "cotton", "canvas",
]

# English -> Indonesian
MATERIAL_SYNONYMS = {
    "wood": "kayu",
    "wooden": "kayu",
    "teak": "kayu jati",
    "jati": "kayu jati",
    "leather": "kulit",
    "fabric": "kain",
    "metal": "besi",
    "rattan": "rotan",
    "plastic": "plastik",
    "glass": "kaca",
    "marble": "marmer",
    "velvet": "beludru",
    "cotton": "katun",
}

PRICE_DESCRIPTORS = [
    "murah", "cheap", "mahal", "expensive", "hemat", "economical",
    "terjangkau", "affordable", "budget", "premium",
]

# Words ignored when judging whether a message is "just an attribute"
FILLER_WORDS = {
    "saya", "aku", "mau", "ingin", "yang", "ada", "adakah", "apa", "boleh", "bisa",
    "warna", "warnanya", "bahan", "bahannya", "buat", "untuk", "beli", "cari", "dong",
    "deh", "aja", "saja", "kak", "gan", "nya", "kalau", "kalo", "gimana",
    "i", "want", "would", "like", "the", "a", "an", "that", "this", "is", "are",
    "in", "one", "ones", "please", "color", "colour", "material", "made", "of",
    "how", "about", "what", "some", "something",
}

# Phrases that explicitly start a new search
NEW_SEARCH_TRIGGERS = [
    "cari", "cariin", "carikan", "tampilkan", "tunjukkan",
    "find", "search", "show me", "looking for", "i'm looking for",
]

# Multi-word triggers also count when they appear mid-sentence
NEW_SEARCH_PHRASES = [
    "show me", "looking for", "search for", "carikan", "cariin", "tunjukkan",
]

# Leading phrases stripped from a query before it is searched or extended.
# Longest alternatives first.
LEAD_IN_PHRASES = [
    "saya mau cari", "saya sedang cari", "saya mencari", "saya cari", "saya mau",
    "saya ingin", "aku mau", "tolong carikan", "carikan", "cariin", "cari",
    "mau", "tampilkan", "tampil", "tunjukkan", "show me", "show", "find",
    "i'm looking for", "looking for", "search for", "i want", "i need",
    "adakah", "apa ada", "ada",
]

GREETING_LEAD_INS = [
    "selamat pagi", "selamat siang", "selamat sore", "selamat malam",
    "good morning", "good afternoon", "good evening",
    "hello", "halo", "hallo", "hai", "hi", "hey", "pagi", "siang", "sore", "malam",
]

ATTRIBUTE_LEAD_INS = [
    "yang warna", "yang bahannya", "yang bahan", "yang", "warna", "bahannya", "bahan",
]

# Tokens that mark a message as Indonesian
INDONESIAN_INDICATORS = {
    "apa", "ada", "saya", "aku", "mau", "cari", "carikan", "tampil", "tampilkan",
    "tolong", "halo", "hai", "boleh", "bisa", "produk", "barang", "warna", "harga",
    "yang", "dong", "kak", "iya", "ya", "berapa", "dimana", "di", "mana", "jam",
    "buka", "toko", "alamat", "lokasi", "ingin", "terima", "kasih", "bantu",
    "selamat", "pagi", "siang", "sore", "malam", "dan", "atau", "untuk", "dengan",
    "putih", "hitam", "coklat", "merah", "biru", "hijau", "kuning", "abu",
    "kayu", "kulit", "kain", "besi", "rotan", "kaca",
    "meja", "kursi", "lemari", "rak", "kasur", "ranjang", "lampu",
    "murah", "mahal", "hemat", "terjangkau", "oke", "lanjut", "kirim", "pengiriman",
}

AFFIRMATIVE_TOKENS = [
    "iya", "iyaa", "ya", "yaa", "yes", "yep", "yup", "yeah", "ok", "oke", "okay",
    "okey", "sip", "boleh", "mau", "sure", "tentu", "lanjut", "please", "silakan",
    "tolong",
]

GREETING_PREFIXES = GREETING_LEAD_INS

HELP_PREFIXES = [
    "help", "bantu", "bantuan", "tolong bantu", "bagaimana", "cara", "how do", "how does",
    "what can you do", "apa yang bisa",
]

RESET_KEYWORDS = [
    "reset", "hapus", "clear", "kosongkan", "mulai ulang", "start over", "remove filter",
]

# FAQ topics with their trigger keywords, checked in order
FAQ_KEYWORDS = {
    "hours": ["jam buka", "jam operasional", "buka jam", "opening hours", "open hours", "what time"],
    "location": ["alamat", "lokasi", "dimana toko", "di mana toko", "showroom", "where is your store",
                 "store location", "address"],
    "shipping": ["pengiriman", "ongkir", "ongkos kirim", "delivery", "shipping"],
    "payment": ["pembayaran", "bayar", "cicilan", "payment", "installment"],
    "warranty": ["garansi", "retur", "warranty", "return policy", "refund"],
}
