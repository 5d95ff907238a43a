# quiz/fallback_bank.py - Static question bank used to top up provider content

from typing import Dict, List

from quiz.models import Difficulty, Question

SOURCE = "Fallback"

# (question, answer, options)
_EASY = [
    ("Who is the main protagonist of One Piece?", "Monkey D. Luffy", ("Monkey D. Luffy", "Roronoa Zoro", "Nami", "Sanji")),
    ("What is Luffy's Devil Fruit power?", "Rubber abilities", ("Rubber abilities", "Fire powers", "Ice powers", "Lightning powers")),
    ("What is the name of Luffy's pirate crew?", "Straw Hat Pirates", ("Straw Hat Pirates", "Red Hair Pirates", "Whitebeard Pirates", "Heart Pirates")),
    ("What is Nico Robin's Devil Fruit power called?", "Hana Hana no Mi", ("Hana Hana no Mi", "Gomu Gomu no Mi", "Mera Mera no Mi", "Hito Hito no Mi")),
    ("What is the currency used in the One Piece world?", "Belly", ("Belly", "Zeni", "Jenny", "Gold")),
    ("What type of animal is Tony Tony Chopper?", "Reindeer", ("Reindeer", "Deer", "Moose", "Elk")),
    ("What village is Naruto from?", "Hidden Leaf Village", ("Hidden Leaf Village", "Hidden Sand Village", "Hidden Mist Village", "Hidden Cloud Village")),
    ("What color is Naruto's signature jumpsuit?", "Orange", ("Orange", "Blue", "Red", "Yellow")),
    ("What is Sasuke's clan name?", "Uchiha", ("Uchiha", "Uzumaki", "Hyuga", "Nara")),
    ("What is Sakura's hair color?", "Pink", ("Pink", "Blonde", "Black", "Red")),
    ("What color are Naruto's eyes?", "Blue", ("Blue", "Brown", "Green", "Black")),
    ("How many Dragon Balls are there?", "7", ("7", "5", "9", "12")),
    ("What is Goku's Saiyan name?", "Kakarot", ("Kakarot", "Raditz", "Vegeta", "Nappa")),
    ("What is Vegeta's signature attack?", "Final Flash", ("Final Flash", "Kamehameha", "Special Beam Cannon", "Destructo Disk")),
    ("What is Deku's real name?", "Izuku Midoriya", ("Izuku Midoriya", "Katsuki Bakugo", "Shoto Todoroki", "Tenya Iida")),
    ("What is All Might's real name?", "Toshinori Yagi", ("Toshinori Yagi", "Izuku Midoriya", "Shota Aizawa", "Hizashi Yamada")),
    ("What is Bakugo's hero name?", "Dynamight", ("Dynamight", "Explosion", "Blast", "Boom")),
    ("What is the main character's name in Attack on Titan?", "Eren Yeager", ("Eren Yeager", "Mikasa Ackerman", "Armin Arlert", "Levi Ackerman")),
    ("What are the giant humanoid creatures called in Attack on Titan?", "Titans", ("Titans", "Giants", "Colossi", "Behemoths")),
    ("What are the walls called in Attack on Titan?", "Maria, Rose, and Sheena", ("Maria, Rose, and Sheena", "Alpha, Beta, and Gamma", "First, Second, and Third", "North, South, and Center")),
    ("What is the name of the notebook in Death Note?", "Death Note", ("Death Note", "Kill Book", "Death Journal", "Murder Diary")),
    ("What is Light's last name?", "Yagami", ("Yagami", "Kira", "Lawliet", "Amane")),
    ("What is Nezuko to Tanjiro?", "Sister", ("Sister", "Friend", "Girlfriend", "Cousin")),
    ("What is Tanjiro's main weapon?", "Sword", ("Sword", "Bow", "Spear", "Axe")),
    ("What type of Pokemon is Pikachu?", "Electric", ("Electric", "Fire", "Water", "Grass")),
    ("Who is Ash's first Pokemon?", "Pikachu", ("Pikachu", "Charmander", "Squirtle", "Bulbasaur")),
    ("What type is Charizard?", "Fire/Flying", ("Fire/Flying", "Fire/Dragon", "Fire", "Dragon")),
    ("What does 'anime' literally mean in Japanese?", "Animation", ("Animation", "Cartoon", "Drawing", "Story")),
    ("In Sailor Moon, what is Usagi's superhero name?", "Sailor Moon", ("Sailor Moon", "Sailor Mars", "Sailor Venus", "Sailor Jupiter")),
    ("In One Punch Man, what is Saitama known for?", "Defeating enemies in one punch", ("Defeating enemies in one punch", "Super speed", "Flight", "Telepathy")),
    ("What is the main setting of Fairy Tail?", "A wizard guild", ("A wizard guild", "A ninja village", "A pirate ship", "A school")),
    ("In Bleach, what are soul reapers called in Japanese?", "Shinigami", ("Shinigami", "Hollow", "Quincy", "Arrancar")),
    ("What is the main character's power in Mob Psycho 100?", "Psychic abilities", ("Psychic abilities", "Super strength", "Time manipulation", "Shape shifting")),
    ("In Naruto, what village is Naruto from?", "Hidden Leaf Village", ("Hidden Leaf Village", "Hidden Sand Village", "Hidden Mist Village", "Hidden Cloud Village")),
    ("In My Hero Academia, what is Deku's real name?", "Izuku Midoriya", ("Izuku Midoriya", "Katsuki Bakugo", "Shoto Todoroki", "Tenya Iida")),
    ("What anime features a notebook that can kill people?", "Death Note", ("Death Note", "Code Geass", "Psycho-Pass", "Future Diary")),
    ("In Dragon Ball Z, what is Goku's Saiyan name?", "Kakarot", ("Kakarot", "Vegeta", "Raditz", "Bardock")),
    ("What is the name of the main character in Bleach?", "Ichigo Kurosaki", ("Ichigo Kurosaki", "Rukia Kuchiki", "Uryu Ishida", "Chad Sado")),
    ("In Attack on Titan, what do titans primarily eat?", "Humans", ("Humans", "Animals", "Plants", "Nothing")),
    ("In Demon Slayer, what breathing technique does Tanjiro use?", "Water Breathing", ("Water Breathing", "Fire Breathing", "Wind Breathing", "Stone Breathing")),
    ("What anime features giant humanoid creatures called Titans?", "Attack on Titan", ("Attack on Titan", "Evangelion", "Code Geass", "Gundam")),
    ("In which anime do characters have 'Quirks'?", "My Hero Academia", ("My Hero Academia", "Naruto", "One Piece", "Bleach")),
]

_MEDIUM = [
    ("What is the name of Nico Robin's home island?", "Ohara", ("Ohara", "Alabasta", "Water 7", "Enies Lobby")),
    ("What is the name of the sea where most of One Piece takes place?", "Grand Line", ("Grand Line", "East Blue", "West Blue", "Red Line")),
    ("What is the name of Luffy's first crew member?", "Roronoa Zoro", ("Roronoa Zoro", "Nami", "Usopp", "Sanji")),
    ("What is the name of Sanji's fighting style?", "Black Leg Style", ("Black Leg Style", "Red Leg Style", "Blue Leg Style", "Green Leg Style")),
    ("What is Zoro's dream?", "To become the world's greatest swordsman", ("To become the world's greatest swordsman", "To find the One Piece", "To draw a map of the world", "To find the All Blue")),
    ("What is Brook's Devil Fruit power?", "Revive-Revive Fruit", ("Revive-Revive Fruit", "Soul-Soul Fruit", "Bone-Bone Fruit", "Music-Music Fruit")),
    ("What is the name of the cook on the Straw Hat crew?", "Sanji", ("Sanji", "Zoro", "Usopp", "Chopper")),
    ("What is the name of Naruto's signature jutsu?", "Shadow Clone Jutsu", ("Shadow Clone Jutsu", "Rasengan", "Chidori", "Fireball Jutsu")),
    ("Who is Naruto's sensei in Team 7?", "Kakashi Hatake", ("Kakashi Hatake", "Iruka Umino", "Asuma Sarutobi", "Might Guy")),
    ("What is the name of the Nine-Tailed Fox?", "Kurama", ("Kurama", "Shukaku", "Matatabi", "Isobu")),
    ("In Naruto, what is the name of Kakashi's signature jutsu?", "Chidori", ("Chidori", "Rasengan", "Shadow Clone", "Fireball Jutsu")),
    ("What is the name of Sasuke's older brother?", "Itachi Uchiha", ("Itachi Uchiha", "Madara Uchiha", "Shisui Uchiha", "Obito Uchiha")),
    ("What is the name of Goku's signature technique?", "Kamehameha", ("Kamehameha", "Final Flash", "Special Beam Cannon", "Destructo Disk")),
    ("Who is Goku's eldest son?", "Gohan", ("Gohan", "Goten", "Trunks", "Vegeta")),
    ("What planet do Saiyans come from?", "Planet Vegeta", ("Planet Vegeta", "Planet Namek", "Planet Earth", "Planet Frieza")),
    ("In Attack on Titan, what is Eren's Titan form called?", "Attack Titan", ("Attack Titan", "Colossal Titan", "Female Titan", "Beast Titan")),
    ("Who is known as 'Humanity's Strongest Soldier' in Attack on Titan?", "Levi Ackerman", ("Levi Ackerman", "Erwin Smith", "Mikasa Ackerman", "Eren Yeager")),
    ("What is the name of Eren's adoptive sister?", "Mikasa Ackerman", ("Mikasa Ackerman", "Historia Reiss", "Annie Leonhart", "Sasha Blouse")),
    ("What is the name of the military branch that fights Titans outside the walls?", "Survey Corps", ("Survey Corps", "Garrison", "Military Police", "Training Corps")),
    ("What is the name of the school in My Hero Academia?", "U.A. High School", ("U.A. High School", "Shiketsu High", "Ketsubutsu Academy", "Seiai Academy")),
    ("What is Todoroki's quirk called?", "Half-Cold Half-Hot", ("Half-Cold Half-Hot", "Ice Fire", "Temperature Control", "Dual Element")),
    ("Who is the principal of U.A. High School?", "Nezu", ("Nezu", "All Might", "Aizawa", "Present Mic")),
    ("What is Iida's quirk called?", "Engine", ("Engine", "Speed", "Turbo", "Rocket")),
    ("What is the name of Light Yagami's Shinigami in Death Note?", "Ryuk", ("Ryuk", "Rem", "Sidoh", "Gelus")),
    ("What is L's real name?", "L Lawliet", ("L Lawliet", "Light Yagami", "Mello", "Near")),
    ("What is the name of Tanjiro's sword style?", "Water Breathing", ("Water Breathing", "Flame Breathing", "Thunder Breathing", "Wind Breathing")),
    ("What is Zenitsu's breathing technique?", "Thunder Breathing", ("Thunder Breathing", "Water Breathing", "Fire Breathing", "Wind Breathing")),
    ("In Fullmetal Alchemist, what is the first law of equivalent exchange?", "To obtain something, something of equal value must be lost", ("To obtain something, something of equal value must be lost", "Energy cannot be created or destroyed", "Matter can be changed but not created", "All things are connected")),
    ("What is Edward Elric's nickname?", "Fullmetal Alchemist", ("Fullmetal Alchemist", "Steel Alchemist", "Iron Alchemist", "Metal Alchemist")),
    ("In JoJo's Bizarre Adventure, what are the supernatural abilities called?", "Stands", ("Stands", "Personas", "Spirits", "Phantoms")),
    ("What is the currency used in the Hunter x Hunter world?", "Jenny", ("Jenny", "Berry", "Zeni", "Beli")),
    ("In Tokyo Ghoul, what do ghouls primarily eat?", "Human flesh", ("Human flesh", "Blood", "Souls", "Energy")),
    ("In Demon Slayer, what is Tanjiro's family name?", "Kamado", ("Kamado", "Hashibira", "Agatsuma", "Shinazugawa")),
    ("In Fullmetal Alchemist, what do the Elric brothers seek?", "Philosopher's Stone", ("Philosopher's Stone", "Dragon Balls", "Death Note", "Holy Grail")),
    ("In One Punch Man, what is Saitama's hero rank initially?", "Class C", ("Class C", "Class B", "Class A", "Class S")),
    ("In Jujutsu Kaisen, what grade is Yuji Itadori initially classified as?", "Grade 4", ("Grade 4", "Grade 3", "Grade 2", "Grade 1")),
    ("In Tokyo Ghoul, what are the creatures that eat humans called?", "Ghouls", ("Ghouls", "Titans", "Demons", "Hollows")),
    ("In Hunter x Hunter, what is the name of the hunter exam arc?", "Hunter Exam", ("Hunter Exam", "Yorknew City", "Greed Island", "Chimera Ant")),
    ("In Seven Deadly Sins, what is Meliodas' sin?", "Wrath", ("Wrath", "Pride", "Greed", "Envy")),
    ("In Fire Force, what are the fire-powered beings called?", "Infernals", ("Infernals", "Pyromancers", "Fire Demons", "Flame Spirits")),
    ("In Black Clover, what is Asta's main trait?", "No magic", ("No magic", "Fire magic", "Wind magic", "Water magic")),
]

_HARD = [
    ("What are the ancient stones that Nico Robin can read called?", "Poneglyphs", ("Poneglyphs", "Road Stones", "Ancient Tablets", "Historia Stones")),
    ("Who was Nico Robin's mentor on Ohara?", "Professor Clover", ("Professor Clover", "Dr. Hiriluk", "Professor Oak", "Dr. Vegapunk")),
    ("What is the name of the prison where Ace was held before his execution?", "Impel Down", ("Impel Down", "Enies Lobby", "Marine Headquarters", "Sabaody")),
    ("In One Piece, where do the Straw Hats first meet Brook?", "Thriller Bark", ("Thriller Bark", "Sabaody Archipelago", "Water 7", "Enies Lobby")),
    ("What is the name of the island where the final battle takes place in One Piece's Marineford Arc?", "Marineford", ("Marineford", "Marine Base", "Navy Island", "Justice Island")),
    ("What is the name of Usopp's father?", "Yasopp", ("Yasopp", "Shanks", "Benn Beckman", "Lucky Roux")),
    ("In Naruto, what is the name of the organization that Itachi belongs to?", "Akatsuki", ("Akatsuki", "Anbu", "Root", "Sound Four")),
    ("What is the name of the village where the Uchiha massacre took place?", "Hidden Leaf Village", ("Hidden Leaf Village", "Hidden Mist Village", "Hidden Sand Village", "Hidden Stone Village")),
    ("What is the name of the technique that Minato Namikaze is famous for?", "Flying Thunder God Technique", ("Flying Thunder God Technique", "Rasengan", "Shadow Clone Jutsu", "Chidori")),
    ("What is the real name of the leader of the Akatsuki?", "Nagato", ("Nagato", "Yahiko", "Konan", "Obito")),
    ("What is the name of the ultimate technique in Dragon Ball that Goku learns from King Kai?", "Spirit Bomb", ("Spirit Bomb", "Kamehameha", "Instant Transmission", "Dragon Fist")),
    ("What is the name of the technique Goku uses to teleport in Dragon Ball Z?", "Instant Transmission", ("Instant Transmission", "Teleportation", "Space Jump", "Dimension Shift")),
    ("What is the name of the first villain in Dragon Ball Z?", "Raditz", ("Raditz", "Vegeta", "Nappa", "Frieza")),
    ("In Attack on Titan, what is the name of the serum that turns people into Titans?", "Titan Serum", ("Titan Serum", "Founding Serum", "Beast Serum", "Colossal Serum")),
    ("What is the name of Eren's half-brother?", "Zeke Yeager", ("Zeke Yeager", "Reiner Braun", "Bertholdt Hoover", "Marcel Galliard")),
    ("What is the name of the country that contains the walls in Attack on Titan?", "Paradis Island", ("Paradis Island", "Marley", "Eldia", "Hizuru")),
    ("What is the name of All Might's quirk?", "One For All", ("One For All", "All For One", "Super Strength", "Symbol of Peace")),
    ("What is the name of the main villain in My Hero Academia?", "All For One", ("All For One", "Shigaraki", "Overhaul", "Stain")),
    ("What is Eraserhead's real name?", "Shota Aizawa", ("Shota Aizawa", "Hizashi Yamada", "Toshinori Yagi", "Kenji Tsuragamae")),
    ("What is the name of the organization that L works for?", "Wammy's House", ("Wammy's House", "Interpol", "FBI", "NPA")),
    ("How many days does Light have to live after touching the Death Note?", "No time limit", ("No time limit", "365 days", "100 days", "30 days")),
    ("In Fullmetal Alchemist Brotherhood, what is the name of the country where the story takes place?", "Amestris", ("Amestris", "Xerxes", "Drachma", "Creta")),
    ("What is the name of the technique that allows Edward Elric to perform alchemy without a transmutation circle?", "Clap Alchemy", ("Clap Alchemy", "Truth Alchemy", "Philosopher's Alchemy", "Gate Alchemy")),
    ("What is the name of the Homunculus that represents Pride?", "Selim Bradley", ("Selim Bradley", "King Bradley", "Greed", "Envy")),
    ("In JoJo's Bizarre Adventure: Stardust Crusaders, what is the name of DIO's Stand?", "The World", ("The World", "Star Platinum", "Crazy Diamond", "Gold Experience")),
    ("What is the name of Jotaro's Stand?", "Star Platinum", ("Star Platinum", "The World", "Crazy Diamond", "Gold Experience")),
    ("In Hunter x Hunter, what is Gon's father's name?", "Ging Freecss", ("Ging Freecss", "Silva Zoldyck", "Isaac Netero", "Leorio Paradinight")),
    ("What is the name of the exam that determines who becomes a Hunter in Hunter x Hunter?", "Hunter Exam", ("Hunter Exam", "License Test", "Qualification Trial", "Selection Challenge")),
    ("What is Killua's family's profession?", "Assassins", ("Assassins", "Hunters", "Bodyguards", "Mercenaries")),
    ("In Bleach, what is the name of Ichigo's Zanpakuto?", "Zangetsu", ("Zangetsu", "Senbonzakura", "Hyorinmaru", "Zabimaru")),
    ("What is the name of the organization that Ichigo joins?", "Gotei 13", ("Soul Society", "Gotei 13", "Quincy", "Arrancar")),
    ("In Code Geass, what is the name of Lelouch's Geass power?", "The Power of Absolute Obedience", ("The Power of Absolute Obedience", "Mind Control", "Command Geass", "Royal Authority")),
    ("What is Lelouch's alter ego called?", "Zero", ("Zero", "Emperor", "Black Prince", "Demon")),
    ("What is the name of the organization that Tanjiro joins?", "Demon Slayer Corps", ("Demon Slayer Corps", "Hashira", "Pillar Corps", "Slayer Guild")),
    ("What is the name of the strongest demons after Muzan?", "Twelve Kizuki", ("Twelve Kizuki", "Upper Moons", "Demon Lords", "Elite Demons")),
    ("What is the name of the hero association's top hero before Saitama?", "Blast", ("Blast", "Tornado", "Bang", "King")),
    ("What is Mob's real name?", "Shigeo Kageyama", ("Shigeo Kageyama", "Ritsu Kageyama", "Arataka Reigen", "Teruki Hanazawa")),
    ("What is the name of Ken Kaneki's ghoul mask organization?", "Anteiku", ("Anteiku", "Aogiri Tree", "CCG", "Goat")),
    ("What is the name of Yuji Itadori's cursed technique?", "He doesn't have one initially", ("He doesn't have one initially", "Divergent Fist", "Black Flash", "Sukuna's Malevolent Shrine")),
    ("What is the name of the King of Curses?", "Ryomen Sukuna", ("Ryomen Sukuna", "Mahito", "Jogo", "Hanami")),
    ("What is the name of Shinra's fire ability?", "Devil's Footprints", ("Devil's Footprints", "Fire Step", "Infernal Step", "Flame Feet")),
    ("What is Asta's anti-magic sword called?", "Demon-Slayer Sword", ("Demon-Slayer Sword", "Anti-Magic Sword", "Devil Sword", "Grimoire Sword")),
    ("What is Meliodas's sin?", "Wrath", ("Wrath", "Pride", "Greed", "Envy")),
    ("What is Ainz Ooal Gown's real name in the real world?", "Suzuki Satoru", ("Suzuki Satoru", "Momonga", "Touch Me", "Ulbert Alain Odle")),
    ("What is Subaru's special ability called?", "Return by Death", ("Return by Death", "Resurrection", "Time Loop", "Death Rewind")),
    ("What is the name of the time machine in Steins;Gate?", "Phone Microwave", ("Phone Microwave", "Time Leap Machine", "D-Mail Device", "Divergence Meter")),
    ("What is Roy Mustang's title in Fullmetal Alchemist?", "Flame Alchemist", ("Flame Alchemist", "Steel Alchemist", "State Alchemist", "Fire Colonel")),
    ("What is the name of the school in Kill la Kill?", "Honnouji Academy", ("Honnouji Academy", "Kiryuin Academy", "Satsuki Academy", "Ryuko Academy")),
    ("In Jojo's Bizarre Adventure, what is Dio's stand called?", "The World", ("The World", "Star Platinum", "Crazy Diamond", "Gold Experience")),
    ("In Code Geass, what is Lelouch's Geass power?", "Absolute Obedience", ("Absolute Obedience", "Mind Reading", "Time Stop", "Precognition")),
    ("What is the name of Light's Shinigami in Death Note?", "Ryuk", ("Ryuk", "Rem", "Misa", "Near")),
    ("In Evangelion, what is the name of Shinji's father?", "Gendo Ikari", ("Gendo Ikari", "Ryoji Kaji", "Kozo Fuyutsuki", "Shigeru Aoba")),
    ("What is the real name of the character known as 'L' in Death Note?", "L Lawliet", ("L Lawliet", "Near", "Mello", "Watari")),
    ("In One Piece, what are the names of the three ancient weapons?", "Pluton, Poseidon, Uranus", ("Pluton, Poseidon, Uranus", "Zeus, Hera, Poseidon", "Ares, Athena, Apollo", "Thor, Odin, Loki")),
    ("In Steins;Gate, what is the name of the time machine?", "Phone Microwave", ("Phone Microwave", "Time Machine", "D-Mail", "SERN")),
    ("In Berserk, what is the name of Guts' sword?", "Dragon Slayer", ("Dragon Slayer", "Iron Reaver", "Demon Blade", "God Hand")),
]


def _build(entries, difficulty: Difficulty) -> List[Question]:
    return [
        Question(question=text, answer=answer, options=tuple(options), difficulty=difficulty, source=SOURCE)
        for text, answer, options in entries
    ]


FALLBACK_BANK: Dict[Difficulty, List[Question]] = {
    Difficulty.EASY: _build(_EASY, Difficulty.EASY),
    Difficulty.MEDIUM: _build(_MEDIUM, Difficulty.MEDIUM),
    Difficulty.HARD: _build(_HARD, Difficulty.HARD),
}


def all_fallback_questions() -> List[Question]:
    return [q for bucket in FALLBACK_BANK.values() for q in bucket]
