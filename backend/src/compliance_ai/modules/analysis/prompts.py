"""Instruction template sent to the AI provider for every document."""

from typing import Optional

from ..document.models import DocumentCategory

FILENAME_PLACEHOLDER = "{FILENAME}"

CATEGORY_VALUES = "|".join(category.value for category in DocumentCategory)

ANALYSIS_PROMPT_TEMPLATE = """You are an AI assistant specialized in analyzing regulatory compliance documents.

TASK: Analyze a compliance document and extract ALL of its structured information in one complete analysis.

MANDATORY RESPONSE FORMAT:
You MUST answer with valid JSON that has EXACTLY this structure:

{
    "summary": "Detailed, structured summary of the document (200-500 words)",
    "keyPoints": [
      {
        "title": "First crucial key point found in the document"
      },
      {
        "title": "Second crucial key point found in the document"
      },
      {
        "title": "Third crucial key point found in the document"
      }
    ],
    "actionSuggestions": [
      {
        "title": "First concrete, achievable action to take",
        "isCompleted": false,
        "label": "action label"
      },
      {
        "title": "Second concrete, achievable action to take",
        "isCompleted": false,
        "label": "action label"
      },
      {
        "title": "Third concrete, achievable action to take",
        "isCompleted": false,
        "label": "action label"
      }
    ],
    "category": "CONTRACT",
    "totalPages": 15,
    "isComplete": true
  }

STRICT FORMATTING RULES:
1. ALWAYS answer with the JSON only (no text before or after it)
2. Use double quotes for every key and every string value
3. Follow the JSON structure above exactly
4. No comments or explanations outside the JSON
5. "category" must be one of: __CATEGORIES__

DETAILED INSTRUCTIONS:

A) SUMMARY ("summary" field):
   - Length: 200-500 words REQUIRED
   - Style: professional and structured
   - Content: complete synthesis of the document including its critical aspects
   - Structure: introduction, main points, conclusion

B) KEY POINTS ("keyPoints" field):
   - Count: 5-15 points MAXIMUM
   - Criteria: only the MOST IMPORTANT elements
   - Length per point: 1-2 concise, precise sentences

C) ACTION SUGGESTIONS ("actionSuggestions" field):
   - Count: 3-10 actions MAXIMUM
   - Nature: concrete, specific actions that can be carried out immediately
   - Focus: better compliance and lower risk
   - Wording: action verb followed by a precise goal
   - Ordering: most critical actions first
   - Avoid: vague actions that cannot be measured

EXPECTED QUALITY:
- Technical accuracy and appropriate terminology
- Correct identification of the compliance stakes
- Practical, achievable actions
- Classification that matches the actual content
- Structured, informative summary
- Key points that are truly essential

DOCUMENT TO ANALYZE:
File name: {FILENAME}

STEP BY STEP:
1. READ the whole document provided (text and visual elements)
2. IDENTIFY the most appropriate category for its content
3. EXTRACT the information that matters for compliance
4. WRITE a structured, professional summary (200-500 words)
5. SELECT the 5-15 most important key points
6. FORMULATE 3-10 concrete, achievable actions
7. ESTIMATE the total number of pages of the document
8. RETURN everything as JSON in the exact format above

CRITICAL REMINDER: Answer ONLY with the valid JSON, without any additional text before or after it.""".replace(
    "__CATEGORIES__", CATEGORY_VALUES
)


def build_analysis_prompt(display_name: str, category: Optional[DocumentCategory] = None) -> str:
    """Render the analysis prompt for a document.

    The display name is substituted as-is, without escaping. A category hint,
    when given, is appended as an extra instruction.
    """
    prompt = ANALYSIS_PROMPT_TEMPLATE.replace(FILENAME_PLACEHOLDER, display_name)
    if category is not None:
        prompt += (
            f"\n\nADDITIONAL INSTRUCTION: the uploader indicated that this document is a {category.value}. "
            f'Use "{category.value}" as the category unless the content clearly shows otherwise.'
        )
    return prompt
