"""Manual standalone test for the Antakshari MCP Server.

Run: python test_manual.py
"""

import asyncio
import sys

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client


async def main():
    server = StdioServerParameters(
        command=sys.executable,
        args=["-m", "antakshari_mcp"],
    )

    async with stdio_client(server) as (read, write):
        async with ClientSession(read, write) as session:
            await session.initialize()

            # 1. List available tools
            tools = await session.list_tools()
            print("=== Available Tools ===")
            for t in tools.tools:
                print(f"  - {t.name}: {t.description[:80]}...")
            print()

            # 2. Start with the Gita opening (next letter य)
            print("=== start_game(0) ===")
            result = await session.call_tool("start_game", {"opening": 0})
            print(result.content[0].text)
            print()

            # 3. A verse starting with य, typed phonetically
            print("=== submit_verse (phonetic) ===")
            result = await session.call_tool(
                "submit_verse",
                {"text": "yadaa yadaa hi dharmasya glaanirbhavati bhaarata"},
            )
            print(result.content[0].text)
            print()

            # 4. Wrong starting letter
            print("=== submit_verse (wrong letter) ===")
            result = await session.call_tool("submit_verse", {"text": "कर्मण्येवाधिकारस्ते मा फलेषु"})
            print(result.content[0].text)
            print()

            # 5. Transcript
            print("=== game_status() ===")
            result = await session.call_tool("game_status", {})
            print(result.content[0].text)
            print()

            # 6. Corpus coverage and preview
            print("=== corpus_stats() ===")
            result = await session.call_tool("corpus_stats", {})
            print(result.content[0].text)
            print()

            print("=== transliteration_preview('shri rama') ===")
            result = await session.call_tool("transliteration_preview", {"text": "shri rama"})
            print(result.content[0].text)
            print()

            # 7. End the game, then try to play on
            print("=== end_game / submit after end ===")
            result = await session.call_tool("end_game", {"reason": "Manual test finished"})
            print(result.content[0].text)
            result = await session.call_tool("submit_verse", {"text": "यदा यदा हि धर्मस्य"})
            print(result.content[0].text)


if __name__ == "__main__":
    asyncio.run(main())
