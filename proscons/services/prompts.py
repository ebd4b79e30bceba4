from __future__ import annotations

from string import Template

# $topic is interpolated as-is; the model is told, not forced, to answer with JSON only.
ANALYSIS_PROMPT = Template("""
Вы — эксперт по анализу решений и генерации структурированных данных. Ваша задача — проанализировать указанное ниже занятие или деятельность и сгенерировать исчерпывающий список плюсов и минусов, касающихся этого выбора.

### Строгие инструкции по форматированию:
1.  **Вывод должен быть ТОЛЬКО в формате JSON.** Не добавляйте никакого дополнительного текста, введения, пояснений или markdown-тегов (например, ```json) до или после самого JSON-объекта.
2.  Объект JSON должен иметь корневой ключ `analysis`.
3.  Объект `analysis` должен содержать два обязательных ключа: `pros` (Плюсы) и `cons` (Минусы).
4.  Значения ключей `pros` и `cons` должны быть **массивами строк**.
5.  Каждая строка в массиве должна быть кратким и четким утверждением (не более одного предложения).
6.  Язык ответа: Русский.

### Запрос для анализа:
**Проанализируйте следующее занятие:** $topic

### Требуемый вывод (Строгий формат JSON):
{
  "analysis": {
    "pros": ["...", "..."],
    "cons": ["...", "..."]
  }
}
""")


def render_prompt(topic: str) -> str:
    return ANALYSIS_PROMPT.substitute(topic=topic)
