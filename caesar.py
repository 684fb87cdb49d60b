#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CAESAR CODEC — ядро шифра Цезаря для русских текстов
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
Фиксированный алфавит из 75 символов (заглавные и строчные буквы с Ё,
знаки препинания и пробел) и три способа расшифровки:
  1. Известный ключ
  2. Полный перебор ключей
  3. Частотный анализ по открытому тексту того же автора

Оба криптоаналитических метода проверяют кандидата одной эвристикой:
подсчётом начал предложений вида «буква → знак → пробел → буква».
"""

import codecs
import io
import logging
from dataclasses import dataclass
from typing import BinaryIO, Callable, Dict, Optional

log = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# АЛФАВИТ
# ═══════════════════════════════════════════════════════════════════════════════

RU_UPPER = 'АБВГДЕЁЖЗИЙКЛМНОПРСТУФХЦЧШЩЪЫЬЭЮЯ'
RU_LOWER = 'абвгдеёжзийклмнопрстуфхцчшщъыьэюя'
PUNCTUATION = ':,"?-—.! '

ALPHABET = RU_UPPER + RU_LOWER + PUNCTUATION
ALPHABET_SIZE = len(ALPHABET)  # 75

LOOKUP: Dict[str, int] = {ch: i for i, ch in enumerate(ALPHABET)}

if ALPHABET_SIZE != 75 or len(LOOKUP) != ALPHABET_SIZE:
    raise RuntimeError(f"ALPHABET must hold 75 unique chars (got {ALPHABET_SIZE})")

# Замена для символов вне алфавита
SKIP_CHAR = '~'

# Самый частый символ в большинстве текстов
MOST_FREQUENT_CHAR = ' '

END_PUNCTUATION = frozenset('.,!?:')
DASHES = frozenset('-—')

CHUNK_SIZE = 64 * 1024

Reporter = Callable[[str], None]


# ═══════════════════════════════════════════════════════════════════════════════
# ОШИБКИ
# ═══════════════════════════════════════════════════════════════════════════════

class CipherError(Exception):
    """Базовая ошибка шифровальщика"""


class ConfigError(CipherError, ValueError):
    """Неверный ключ или параметры запуска"""


class CodecIOError(CipherError, IOError):
    """Ошибка чтения, записи или декодирования UTF-8"""


# ═══════════════════════════════════════════════════════════════════════════════
# СДВИГ
# ═══════════════════════════════════════════════════════════════════════════════

def encode_shift(char: str, key: int) -> str:
    pos = LOOKUP.get(char)
    if pos is None:
        return SKIP_CHAR
    return ALPHABET[(pos + key) % ALPHABET_SIZE]


def decode_shift(char: str, key: int) -> str:
    pos = LOOKUP.get(char)
    if pos is None:
        return SKIP_CHAR
    return ALPHABET[(pos - key) % ALPHABET_SIZE]


# ═══════════════════════════════════════════════════════════════════════════════
# ПОТОКОВАЯ ОБРАБОТКА
# ═══════════════════════════════════════════════════════════════════════════════

def process(src: BinaryIO, dst: BinaryIO, f: Callable[[str], str]) -> None:
    """
    Читает src как UTF-8 посимвольно, пропускает каждый символ через f
    и пишет результат в dst в UTF-8.

    Чтение и запись идут блоками по CHUNK_SIZE байт. Потоки принадлежат
    вызывающему и не закрываются. Битый UTF-8 (в том числе обрезанный
    последний символ) и ошибки ввода-вывода дают CodecIOError.
    """
    decoder = codecs.getincrementaldecoder('utf-8')()
    try:
        while True:
            chunk = src.read(CHUNK_SIZE)
            if not chunk:
                break
            text = decoder.decode(chunk)
            if text:
                dst.write(''.join(map(f, text)).encode('utf-8'))
        # обрезанный в конце символ здесь даёт UnicodeDecodeError
        decoder.decode(b'', final=True)
        dst.flush()
    except UnicodeDecodeError as e:
        raise CodecIOError(f"некорректный UTF-8: {e}") from e
    except OSError as e:
        raise CodecIOError(f"ошибка ввода-вывода: {e}") from e


def _read_all(src: BinaryIO) -> bytes:
    try:
        return src.read()
    except OSError as e:
        raise CodecIOError(f"ошибка чтения: {e}") from e


def _decode_buffer(buf: bytes) -> str:
    try:
        return buf.decode('utf-8')
    except UnicodeDecodeError as e:
        raise CodecIOError(f"некорректный UTF-8: {e}") from e


# ═══════════════════════════════════════════════════════════════════════════════
# ОЦЕНКА ПРАВДОПОДОБИЯ
# ═══════════════════════════════════════════════════════════════════════════════

# Состояния автомата: после буквы (или в начале) / после знака / после пробела
_AFTER_LETTER = 1
_AFTER_PUNCT = 2
_AFTER_SPACE = 3


def score(buf: bytes, key: int) -> int:
    """
    Считает начала предложений «буква → знак → пробел → буква» в тексте,
    который получился бы при расшифровке buf ключом key.

    Текст не собирается целиком: каждый символ сдвигается на лету.
    Символы вне алфавита пропускаются без смены состояния.
    Знак препинания не после буквы, а также тире сразу после знака
    обрывают просмотр: структура предложений разрушена.
    """
    stat = 0
    state = _AFTER_LETTER

    for char in _decode_buffer(buf):
        pos = LOOKUP.get(char)
        if pos is None:
            continue
        char = ALPHABET[(pos - key) % ALPHABET_SIZE]

        if char in DASHES:
            if state == _AFTER_PUNCT:
                break
        elif char == ' ':
            if state == _AFTER_PUNCT:
                state = _AFTER_SPACE
        elif char in END_PUNCTUATION:
            if state != _AFTER_LETTER:
                break
            state = _AFTER_PUNCT
        else:
            if state == _AFTER_SPACE:
                stat += 1
            state = _AFTER_LETTER

    return stat


def passes_threshold(stat: int, size: int) -> bool:
    """Не меньше 1% длины шифротекста в байтах; пустой буфер не проходит"""
    if size <= 0:
        return False
    return stat * 100 // size >= 1


def most_frequent(buf: bytes) -> Optional[str]:
    """
    Самый частый символ алфавита в buf.

    Максимум обновляется только при строгом превышении, поэтому
    при равенстве побеждает символ, первым набравший это число.
    Символы вне алфавита не считаются; если их нет вовсе, то None.
    """
    counts: Dict[str, int] = {}
    best: Optional[str] = None
    best_count = 0

    for char in _decode_buffer(buf):
        if char not in LOOKUP:
            continue
        n = counts.get(char, 0) + 1
        counts[char] = n
        if n > best_count:
            best, best_count = char, n

    return best


def _stat_line(key: int, stat: int, size: int, ok: bool) -> str:
    verdict = "успех" if ok else "слишком мало -> неудача"
    return (f"ключ {key} -> совпадений шаблона {stat}; "
            f"ожидаемый порог {size // 100} -> {verdict}")


def _try_key(buf: bytes, key: int, report: Reporter) -> bool:
    stat = score(buf, key)
    ok = passes_threshold(stat, len(buf))
    report(_stat_line(key, stat, len(buf), ok))
    return ok


def _commit(buf: bytes, key: int, dst: BinaryIO, report: Reporter) -> int:
    report("Результат: успех. Расшифровка...")
    Cryptographer(key).decode(io.BytesIO(buf), dst)
    return key


# ═══════════════════════════════════════════════════════════════════════════════
# ШИФРОВАЛЬЩИК
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Cryptographer:
    """
    Шифр Цезаря с фиксированным ключом.

    Ключ 0 означает «неизвестен» (для криптоанализа), ключ 75
    допустим и при сдвиге равносилен 0 (перебор с него
    не пробует ни одного ключа). Найденный перебором или анализом ключ
    возвращается, сам объект не меняется.
    """
    key: int = 0

    def __post_init__(self):
        if isinstance(self.key, bool) or not isinstance(self.key, int):
            raise ConfigError(f"неверный ключ: {self.key!r}. Ключ должен быть целым числом")
        if self.key > ALPHABET_SIZE:
            raise ConfigError(f"неверный ключ: {self.key}. Должен быть не больше {ALPHABET_SIZE}")
        if self.key < 0:
            raise ConfigError(f"неверный ключ: {self.key}. Не может быть меньше нуля")

    def encode(self, src: BinaryIO, dst: BinaryIO) -> None:
        log.debug("encode: key=%d", self.key)
        process(src, dst, lambda c: encode_shift(c, self.key))

    def decode(self, src: BinaryIO, dst: BinaryIO) -> None:
        log.debug("decode: key=%d", self.key)
        process(src, dst, lambda c: decode_shift(c, self.key))

    def brute_force(self, src: BinaryIO, dst: BinaryIO,
                    report: Optional[Reporter] = None) -> Optional[int]:
        """
        Перебирает ключи от текущего ключа шифровальщика до 74 включительно.

        Первый ключ, прошедший порог, используется для расшифровки и
        возвращается. Если ни один не подошёл, в dst ничего не пишется
        и возвращается None.
        """
        if report is None:
            report = log.info
        buf = _read_all(src)
        log.debug("brute force: %d bytes, start key=%d", len(buf), self.key)

        report("Перебор ключей...")
        for key in range(self.key, ALPHABET_SIZE):
            if _try_key(buf, key, report):
                return _commit(buf, key, dst, report)

        report("Результат: перебор не дал результата")
        return None

    def frequency_analysis(self, src: BinaryIO, helper: BinaryIO, dst: BinaryIO,
                           report: Optional[Reporter] = None) -> Optional[int]:
        """
        Частотный анализ: самый частый символ шифротекста сопоставляется
        с самым частым символом открытого текста того же автора (helper).

        Если такой ключ не проходит порог, пробуем гипотезу, что самый
        частый символ открытого текста это пробел. Возвращает найденный
        ключ или None.
        """
        if report is None:
            report = log.info
        report("Расшифровка частотным анализом...")

        mf_helper = most_frequent(_read_all(helper))
        buf = _read_all(src)
        mf_cipher = most_frequent(buf)
        log.debug("frequency analysis: helper top=%r, cipher top=%r, %d bytes",
                  mf_helper, mf_cipher, len(buf))

        if mf_cipher is None:
            report("Результат: в шифротексте нет символов алфавита")
            return None

        if mf_helper is not None:
            key = (LOOKUP[mf_cipher] - LOOKUP[mf_helper]) % ALPHABET_SIZE
            report(f"пробуем возможный ключ {key}")
            if _try_key(buf, key, report):
                return _commit(buf, key, dst, report)

        report("Без помощника: пробуем статистически самый частый символ, пробел")
        key = (LOOKUP[mf_cipher] - LOOKUP[MOST_FREQUENT_CHAR]) % ALPHABET_SIZE
        report(f"пробуем возможный ключ {key}")
        if _try_key(buf, key, report):
            return _commit(buf, key, dst, report)

        report("Результат: частотный анализ не дал результата")
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# ФУНКЦИОНАЛЬНЫЙ ИНТЕРФЕЙС
# ═══════════════════════════════════════════════════════════════════════════════

def new_codec(key: int = 0) -> Cryptographer:
    return Cryptographer(key)


def encode(codec: Cryptographer, src: BinaryIO, dst: BinaryIO) -> None:
    codec.encode(src, dst)


def decode_with_key(codec: Cryptographer, src: BinaryIO, dst: BinaryIO) -> None:
    codec.decode(src, dst)


def brute_force_decode(codec: Cryptographer, src: BinaryIO, dst: BinaryIO,
                       report: Optional[Reporter] = None) -> Optional[int]:
    return codec.brute_force(src, dst, report)


def frequency_analysis_decode(codec: Cryptographer, src: BinaryIO, helper: BinaryIO,
                              dst: BinaryIO, report: Optional[Reporter] = None) -> Optional[int]:
    return codec.frequency_analysis(src, helper, dst, report)


def encode_text(text: str, key: int) -> str:
    """Шифрует строку тем же потоковым путём, что и файлы"""
    out = io.BytesIO()
    Cryptographer(key).encode(io.BytesIO(text.encode('utf-8')), out)
    return out.getvalue().decode('utf-8')


def decode_text(text: str, key: int) -> str:
    out = io.BytesIO()
    Cryptographer(key).decode(io.BytesIO(text.encode('utf-8')), out)
    return out.getvalue().decode('utf-8')
