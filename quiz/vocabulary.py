# quiz/vocabulary.py - Anime domain vocabulary used to screen provider questions

# Terms that on their own mark a question as anime/manga content
STRONG_INDICATORS = [
    # Explicit
    'anime', 'manga', 'otaku', 'japanese animation',
    # Series-specific terms
    'devil fruit', 'chakra', 'jutsu', 'quirk', 'stand', 'titan',
    'soul reaper', 'hollow', 'bankai', 'shikai', 'zanpakuto',
    'hokage', 'shinobi', 'ninja village', 'pirate king',
    # Character archetypes
    'tsundere', 'yandere', 'kuudere', 'dandere', 'waifu', 'husbando',
    # Honorifics and cultural terms
    'senpai', 'kouhai', 'sensei', 'chan', 'kun', 'sama',
    # Series names
    'dragon ball', 'one piece', 'naruto', 'bleach', 'attack on titan',
    'my hero academia', 'death note', 'fullmetal alchemist',
]

ANIME_TITLES = [
    'naruto', 'one piece', 'bleach', 'dragon ball', 'attack on titan',
    'my hero academia', 'demon slayer', 'jujutsu kaisen', 'hunter x hunter',
    'fullmetal alchemist', 'death note', 'code geass', 'evangelion',
    'cowboy bebop', 'akira', 'spirited away', 'totoro', 'princess mononoke',
    'sailor moon', 'pokemon', 'digimon', 'yu-gi-oh', 'one punch man',
    'mob psycho', 'tokyo ghoul', 'parasyte', 'berserk', 'trigun',
    'fairy tail', 'black clover', 'fire force', 'chainsaw man',
    'assassination classroom', 'haikyuu', 'kuroko', 'food wars',
    'seven deadly sins', 'overlord', 're:zero', 'konosuba',
    'shield hero', 'slime', 'goblin slayer', 'made in abyss',
    'violet evergarden', 'your name', 'weathering with you', 'kimetsu no yaiba',
    'shingeki no kyojin', 'boku no hero academia', 'jojo', 'dragonball',
]

# Regex fragments matched against the lower-cased question
QUESTION_PATTERNS = [
    r'which.*anime', r'in.*anime', r'anime.*series', r'manga.*series',
    r'which.*character', r'protagonist.*of', r'main.*character',
]

CHARACTER_NAMES = [
    'luffy', 'naruto', 'goku', 'ichigo', 'natsu', 'edward',
    'light yagami', 'monkey d', 'uchiha', 'uzumaki',
]

# Off-domain markers: other games, western media, music charts
OFF_DOMAIN_MARKERS = [
    'call of duty', 'minecraft', 'fortnite', 'overwatch',
    'xbox', 'playstation', 'nintendo switch', 'pc game',
    'hollywood', 'netflix', 'disney', 'marvel', 'dc comics',
    'billboard', 'grammy', 'album chart', 'music producer',
]

# Production trivia nobody can answer from watching the show
PRODUCTION_MARKERS = [
    'studio that animated', 'animation studio', 'produced by', 'directed by',
    'composed by', 'music by', 'soundtrack by', 'opening theme', 'ending theme',
    'manga author', 'mangaka', 'light novel author', 'creator of',
    'published by', 'serialized in', 'magazine', 'publisher',
    'network that aired', 'broadcast on', 'streaming platform',
    'budget', 'box office', 'sales figures', 'episode count of',
    'animation technique', 'art style', 'animation quality',
]

# Filler options for single-answer providers that return fewer than four choices
DUMMY_OPTIONS = [
    'Monkey D. Luffy', 'Naruto Uzumaki', 'Edward Elric', 'Light Yagami',
    'Ichigo Kurosaki', 'Natsu Dragneel', 'Eren Yeager', 'Goku',
    'Fire Magic', 'Water Technique', 'Lightning Style', 'Wind Blade',
]

TRUSTED_SOURCES = {'OpenTDB', 'TriviaAPI', 'AniQuizAPI'}
