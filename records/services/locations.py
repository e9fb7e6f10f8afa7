"""
Nigerian states and local government areas offered in address forms.
"""
from typing import List, Optional

STATE_LGAS = {
    "Abia": [
        "Aba North", "Aba South", "Arochukwu", "Bende", "Ikwuano",
        "Isiala Ngwa North", "Isiala Ngwa South", "Isuikwuato", "Obi Ngwa",
        "Ohafia", "Osisioma", "Ugwunagbo", "Ukwa East", "Ukwa West",
        "Umuahia North", "Umuahia South", "Umu Nneochi",
    ],
    "Akwa Ibom": [
        "Abak", "Eastern Obolo", "Eket", "Esit Eket", "Essien Udim",
        "Etim Ekpo", "Etinan", "Ibeno", "Ibesikpo Asutan", "Ibiono-Ibom",
        "Ika", "Ikono", "Ikot Abasi", "Ikot Ekpene", "Ini", "Itu",
        "Mbo", "Mkpat-Enin", "Nsit-Atai", "Nsit-Ibom", "Nsit-Ubium",
        "Obot Akara", "Okobo", "Onna", "Oron", "Oruk Anam",
        "Udung-Uko", "Ukanafun", "Uruan", "Urue-Offong/Oruko", "Uyo",
    ],
    "Lagos": [
        "Agege", "Ajeromi-Ifelodun", "Alimosho", "Amuwo-Odofin", "Apapa",
        "Badagry", "Epe", "Eti Osa", "Ibeju-Lekki", "Ifako-Ijaiye",
        "Ikeja", "Ikorodu", "Kosofe", "Lagos Island", "Lagos Mainland",
        "Mushin", "Ojo", "Oshodi-Isolo", "Shomolu", "Surulere",
    ],
    "FCT": [
        "Abaji", "Bwari", "Gwagwalada", "Kuje", "Kwali", "Municipal Area Council",
    ],
}

CAPITALS = {
    "Abia": "Umuahia",
    "Akwa Ibom": "Uyo",
    "Lagos": "Ikeja",
    "FCT": "Abuja",
}


def _canonical(state: str) -> Optional[str]:
    for name in STATE_LGAS:
        if name.lower() == (state or '').strip().lower():
            return name
    return None


def states() -> List[dict]:
    return [{'name': name, 'capital': CAPITALS.get(name), 'lgaCount': len(lgas)} for name, lgas in STATE_LGAS.items()]


def lgas(state: str) -> List[str]:
    name = _canonical(state)
    return list(STATE_LGAS[name]) if name else []


def capital(state: str) -> Optional[str]:
    name = _canonical(state)
    return CAPITALS.get(name) if name else None


def state_for_lga(lga: str) -> Optional[str]:
    wanted = (lga or '').strip().lower()
    for name, names in STATE_LGAS.items():
        if any(x.lower() == wanted for x in names):
            return name
    return None
