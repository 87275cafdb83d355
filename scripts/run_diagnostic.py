#!/usr/bin/env python3
"""
Run the coach diagnostic against the local knowledge base.

Prints, for each diagnostic question, the best-matching section and its
score, then the full answer for any extra questions given on the command line.

Usage:
    python scripts/run_diagnostic.py
    python scripts/run_diagnostic.py "Como abordar cliente antigo?"
"""

import asyncio
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sprint_lab.coach import Coach
from sprint_lab.rag import LocalRetrievalEngine


async def main(questions):
    coach = Coach(LocalRetrievalEngine.from_document())

    answer = await coach.ask("/test")
    print(answer.text)

    for question in questions:
        answer = await coach.ask(question)
        print(f"\n>>> {question}\n{answer.text}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
