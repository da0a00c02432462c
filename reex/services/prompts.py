"""Prompt templates for repository explanations and follow-up chat.

Pure string assembly: identical inputs always produce identical prompts.
"""
from typing import Dict, Optional

EXPLAIN_FILE_CHAR_LIMIT = 2000
CHAT_FILE_CHAR_LIMIT = 1000

ASSISTANT_NAME = "ReEx"

EXPLAIN_INSTRUCTIONS = """Provide a detailed, professional analysis in this format:

## Project Overview
Provide a clear, concise summary of what this project does and its main purpose.

## Architecture & Technology Stack
Based on the files and structure, identify:
- Programming languages used
- Frameworks and libraries
- Build tools and configuration
- Database or storage solutions
- Deployment and infrastructure setup

## Project Structure
Explain the key directories and their purposes based on the file structure.

## Key Dependencies & Tools
List and explain important dependencies from package.json, requirements.txt, or similar files.

## Getting Started
Explain how to set up and run this project locally.

## Notable Features & Implementation Details
Highlight interesting technical decisions, patterns, or unique aspects of the codebase.

## Development Workflow
Based on configuration files, explain the development, testing, and deployment process.

Write in a professional, informative tone that would be valuable for developers wanting to understand or contribute to this project. Focus on technical accuracy and practical insights."""


def format_key_files(key_files: Optional[Dict[str, str]], char_limit: int) -> str:
    """Renders each file as a markdown heading plus a fenced, truncated excerpt."""
    if not key_files:
        return ""
    return "\n\n".join(
        f"### {filename}\n```\n{content[:char_limit]}\n```"
        for filename, content in key_files.items()
    )


def build_explain_prompt(
    repo_url: str,
    readme: str,
    structure: Optional[str] = None,
    key_files: Optional[Dict[str, str]] = None,
) -> str:
    prompt_parts = [
        "You are an expert software engineer and technical writer with deep knowledge of modern development practices.",
        "Analyze this GitHub repository comprehensively using all available information:",
        f"**Repository URL:** {repo_url}",
        f"**README Content:**\n{readme}",
    ]

    if structure:
        prompt_parts.append(f"**Repository Structure:**\n{structure}")

    key_files_info = format_key_files(key_files, EXPLAIN_FILE_CHAR_LIMIT)
    if key_files_info:
        prompt_parts.append(f"**Key Configuration & Project Files:**\n{key_files_info}")

    prompt_parts.append(EXPLAIN_INSTRUCTIONS)
    return "\n\n".join(prompt_parts)


def build_chat_prompt(
    message: str,
    repo_context: Optional[str] = None,
    repo_structure: Optional[str] = None,
    key_files: Optional[Dict[str, str]] = None,
) -> str:
    """
    Builds a follow-up prompt. Falls back to a generic assistant preamble when
    no repository context is supplied.
    """
    context_parts = []
    if repo_context:
        context_parts.append(f"**Repository README:**\n{repo_context}")
    if repo_structure:
        context_parts.append(f"**Repository Structure:**\n{repo_structure}")
    key_files_info = format_key_files(key_files, CHAT_FILE_CHAR_LIMIT)
    if key_files_info:
        context_parts.append(f"**Key Files:**\n{key_files_info}")

    if context_parts:
        context_info = "\n\n".join(context_parts)
        system_prompt = (
            f"You are {ASSISTANT_NAME}, an AI assistant specialized in explaining code repositories. "
            f"You have comprehensive context about a GitHub repository:\n\n"
            f"{context_info}\n\n"
            "Answer the user's question about this repository with detailed, technical insights. "
            "Use the file contents and structure to provide specific, accurate information."
        )
    else:
        system_prompt = (
            f"You are {ASSISTANT_NAME}, an AI assistant specialized in explaining code repositories. "
            "Answer the user's question about software development, GitHub repositories, or coding in general."
        )

    return f"{system_prompt}\n\nUser question: {message}"
